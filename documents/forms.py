from django import forms


class SubirDocumentoForm(forms.Form):
    id_expediente = forms.IntegerField(
        label="ID Expediente", min_value=1,
        widget=forms.NumberInput(attrs={"class": "form-control", "placeholder": "ID Expediente"}),
    )
    archivo = forms.FileField(
        label="Archivo",
        widget=forms.ClearableFileInput(attrs={"class": "form-control"}),
    )
