from django import forms
from django.contrib.auth import authenticate


class LoginForm(forms.Form):
    email = forms.EmailField(
        label="Email",
        widget=forms.EmailInput(attrs={
            "class": "form-control",
            "autofocus": True,
            "autocomplete": "username",
        }),
    )
    password = forms.CharField(
        label="Password",
        strip=False,
        widget=forms.PasswordInput(attrs={
            "class": "form-control",
            "autocomplete": "current-password",
        }),
    )
    remember = forms.BooleanField(
        label="Recuérdame",
        required=False,
        widget=forms.CheckboxInput(attrs={"class": "form-check-input"}),
    )

    error_messages = {
        "invalid_login": "Estas credenciales no coinciden con nuestros registros.",
    }

    def __init__(self, request=None, *args, **kwargs):
        self.request = request
        self.user_cache = None
        super().__init__(*args, **kwargs)

    def clean(self):
        cleaned_data = super().clean()
        email = cleaned_data.get("email")
        password = cleaned_data.get("password")

        # Field-level errors are already attached; nothing to authenticate.
        if not email or not password:
            return cleaned_data

        self.user_cache = authenticate(self.request, email=email, password=password)
        if self.user_cache is None:
            self.add_error("email", self.error_messages["invalid_login"])
        return cleaned_data

    def get_user(self):
        return self.user_cache
