from django import forms


class ClienteForm(forms.Form):
    nombre_completo = forms.CharField(
        label="Nombre completo", max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Nombre"}),
    )
    contacto_email = forms.EmailField(
        label="Email", required=False,
        widget=forms.EmailInput(attrs={"class": "form-control", "placeholder": "Email"}),
    )
    contacto_tel = forms.CharField(
        label="Teléfono", required=False, max_length=50,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Tel"}),
    )
    direccion = forms.CharField(
        label="Dirección", required=False, max_length=255,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Dirección"}),
    )

    def datos(self):
        """Payload para el backend: los opcionales vacíos viajan como null."""
        cd = self.cleaned_data
        return {
            "nombre_completo": cd["nombre_completo"].strip(),
            "contacto_email": cd.get("contacto_email") or None,
            "contacto_tel": (cd.get("contacto_tel") or "").strip() or None,
            "direccion": (cd.get("direccion") or "").strip() or None,
        }
