# cases/forms.py
from django import forms

ESTADOS = ["ABIERTO", "EN_PROCESO", "CERRADO"]
TIPOS = ["GENERAL", "ACTUACION", "INTERNA"]


class ExpedienteForm(forms.Form):
    id_cliente = forms.TypedChoiceField(
        label="Cliente", coerce=int, choices=(),
        error_messages={"required": "Selecciona un cliente.", "invalid_choice": "Selecciona un cliente."},
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    titulo = forms.CharField(
        label="Título", max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Título"}),
    )
    descripcion = forms.CharField(
        label="Descripción", required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 3, "placeholder": "Descripción"}),
    )

    def __init__(self, *args, clientes=(), **kwargs):
        super().__init__(*args, **kwargs)
        opciones = [("", "Selecciona un cliente")]
        for c in clientes:
            etiqueta = f"{c['id_cliente']} — {c['nombre_completo']}"
            if c.get("contacto_email"):
                etiqueta += f" ({c['contacto_email']})"
            opciones.append((str(c["id_cliente"]), etiqueta))
        self.fields["id_cliente"].choices = opciones


class EstadoForm(forms.Form):
    estado = forms.ChoiceField(
        choices=[(e, e) for e in ESTADOS],
        error_messages={"invalid_choice": "Estado inválido.", "required": "Estado inválido."},
        widget=forms.Select(attrs={"class": "form-select form-select-sm"}),
    )


class NotaForm(forms.Form):
    contenido = forms.CharField(
        label="Contenido",
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2, "placeholder": "Contenido de la nota"}),
    )
    tipo = forms.ChoiceField(
        label="Tipo", choices=[(t, t) for t in TIPOS], initial=TIPOS[0],
        widget=forms.Select(attrs={"class": "form-select"}),
    )


class NotaEditarForm(NotaForm):
    # al editar el tipo puede quedar vacío
    tipo = forms.ChoiceField(
        label="Tipo", required=False, choices=[("", "(sin tipo)")] + [(t, t) for t in TIPOS],
        widget=forms.Select(attrs={"class": "form-select"}),
    )


class PlazoForm(forms.Form):
    descripcion = forms.CharField(
        label="Descripción", max_length=255,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Descripción"}),
    )
    fecha_vencimiento = forms.DateField(
        label="Vence",
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}, format="%Y-%m-%d"),
    )
