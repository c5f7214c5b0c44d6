"""
Section schemas for application and onboarding data.

Application data and onboarding answers are a tagged union: each section id
maps to one form below, and a section is accepted only if its form validates.
Uploaded documents arrive as durable storage URLs; file bytes never pass
through here.
"""

import re
from datetime import date
from decimal import Decimal

from django import forms
from django.core.validators import RegexValidator

from apps.core.exceptions import ValidationError

phone_validator = RegexValidator(
    regex=r"^\+?[\d\s().-]{7,20}$",
    message="Enter a valid phone number.",
)


class SectionForm(forms.Form):
    """Base for section forms. ``to_data`` returns JSON-safe cleaned values."""

    exclude_from_storage = ()

    def to_data(self):
        data = {}
        for name, value in self.cleaned_data.items():
            if name in self.exclude_from_storage or value in (None, ""):
                continue
            if isinstance(value, date):
                value = value.isoformat()
            elif isinstance(value, Decimal):
                value = str(value)
            data[name] = value
        return data


class PersonalSectionForm(SectionForm):
    exclude_from_storage = ("ssn",)

    first_name = forms.CharField(max_length=150)
    last_name = forms.CharField(max_length=150)
    email = forms.EmailField()
    phone = forms.CharField(max_length=20, validators=[phone_validator])
    date_of_birth = forms.DateField()
    # Full SSN is accepted on input and reduced to its last four digits.
    ssn = forms.CharField(max_length=11, required=False)
    ssn_last_four = forms.RegexField(regex=r"^\d{4}$", required=False)
    drivers_license_state = forms.CharField(max_length=2, required=False)
    drivers_license_number = forms.CharField(max_length=50, required=False)

    def clean_date_of_birth(self):
        dob = self.cleaned_data["date_of_birth"]
        if dob >= date.today():
            raise forms.ValidationError("Date of birth must be in the past.")
        return dob

    def clean_ssn(self):
        ssn = self.cleaned_data.get("ssn", "")
        if not ssn:
            return ""
        digits = re.sub(r"\D", "", ssn)
        if len(digits) != 9:
            raise forms.ValidationError("SSN must contain exactly 9 digits.")
        return digits

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("ssn"):
            cleaned["ssn_last_four"] = cleaned["ssn"][-4:]
        return cleaned


class EmploymentSectionForm(SectionForm):
    EMPLOYMENT_TYPE_CHOICES = [
        ("full_time", "Full-Time Employee"),
        ("part_time", "Part-Time Employee"),
        ("self_employed", "Self-Employed"),
        ("contractor", "Independent Contractor"),
        ("retired", "Retired"),
        ("student", "Student"),
        ("unemployed", "Currently Unemployed"),
        ("other", "Other"),
    ]
    EMPLOYER_REQUIRED = ("full_time", "part_time", "contractor")

    employment_type = forms.ChoiceField(choices=EMPLOYMENT_TYPE_CHOICES)
    employer_name = forms.CharField(max_length=200, required=False)
    job_title = forms.CharField(max_length=200, required=False)
    employer_phone = forms.CharField(max_length=20, required=False, validators=[phone_validator])
    start_date = forms.DateField(required=False)
    annual_income = forms.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("employment_type") in self.EMPLOYER_REQUIRED and not cleaned.get("employer_name"):
            self.add_error("employer_name", "Employer name is required for this employment type.")
        return cleaned


class UploadedDocumentForm(SectionForm):
    file_name = forms.CharField(max_length=255)
    file_url = forms.URLField(max_length=500)


class ProofOfAddressSectionForm(UploadedDocumentForm):
    DOCUMENT_TYPE_CHOICES = [
        ("utility_bill", "Utility Bill"),
        ("bank_statement", "Bank Statement"),
        ("government_letter", "Government Letter"),
        ("lease_agreement", "Previous Lease"),
        ("other", "Other"),
    ]

    document_type = forms.ChoiceField(choices=DOCUMENT_TYPE_CHOICES)


class PhotoIdSectionForm(UploadedDocumentForm):
    ID_TYPE_CHOICES = [
        ("drivers_license", "Driver's License"),
        ("passport", "Passport"),
        ("state_id", "State ID"),
        ("other", "Other Government ID"),
    ]

    id_type = forms.ChoiceField(choices=ID_TYPE_CHOICES)
    back_file_url = forms.URLField(max_length=500, required=False)
    expiration_date = forms.DateField(required=False)

    def clean_expiration_date(self):
        expires = self.cleaned_data.get("expiration_date")
        if expires and expires < date.today():
            raise forms.ValidationError("This ID has expired.")
        return expires


class EmergencyContactSectionForm(SectionForm):
    name = forms.CharField(max_length=200)
    relationship = forms.CharField(max_length=100)
    phone = forms.CharField(max_length=20, validators=[phone_validator])
    email = forms.EmailField(required=False)


class ReviewSectionForm(SectionForm):
    confirmed = forms.BooleanField()
    signature_name = forms.CharField(max_length=200, required=False)


SECTION_FORMS = {
    "personal": PersonalSectionForm,
    "employment": EmploymentSectionForm,
    "proof_of_address": ProofOfAddressSectionForm,
    "photo_id": PhotoIdSectionForm,
    "emergency_contact": EmergencyContactSectionForm,
    "review": ReviewSectionForm,
}

APPLICATION_SECTIONS = ("personal", "employment", "proof_of_address", "photo_id", "emergency_contact")
APPLICATION_REQUIRED_SECTIONS = ("personal", "employment", "emergency_contact")


def _form_errors(form):
    return {field: [str(e) for e in errors] for field, errors in form.errors.items()}


def clean_section(section, data):
    """Validate one section and return its storable data."""
    form_class = SECTION_FORMS.get(section)
    if form_class is None:
        raise ValidationError(f"Unknown section '{section}'.", errors={"section": [section]})
    if not isinstance(data, dict):
        raise ValidationError(f"Section '{section}' must be an object.", errors={section: ["Expected an object."]})
    form = form_class(data=data)
    if not form.is_valid():
        raise ValidationError(f"Section '{section}' is invalid.", errors={section: _form_errors(form)})
    return form.to_data()


def clean_application_data(data):
    """Validate application data; every required section must be present and valid."""
    if not isinstance(data, dict) or not data:
        raise ValidationError("Application data is required.", errors={"applicationData": ["This field is required."]})

    errors = {}
    for section in APPLICATION_REQUIRED_SECTIONS:
        if not data.get(section):
            errors[section] = ["This section is required."]
    for section in data:
        if section not in APPLICATION_SECTIONS:
            errors[section] = ["Unknown section."]
    if errors:
        raise ValidationError("Application data is incomplete.", errors=errors)

    cleaned = {}
    for section, section_data in data.items():
        try:
            cleaned[section] = clean_section(section, section_data)
        except ValidationError as e:
            errors.update(e.errors)
    if errors:
        raise ValidationError("Application data is invalid.", errors=errors)
    return cleaned


def mask_sections(data):
    """Copy of section data safe to show back to the user."""
    masked = {section: dict(values) for section, values in (data or {}).items()}
    personal = masked.get("personal")
    if personal and personal.get("ssn_last_four"):
        personal["ssn_masked"] = f"***-**-{personal.pop('ssn_last_four')}"
    return masked
