from django import forms

from .exceptions import ImportParseError
from .phrases import find_duplicate
from .serializers import parse_phrase_import

PHRASE_LENGTH_ERROR = 'Phrase must be 3-32 characters.'


class AddPhraseForm(forms.Form):
    text = forms.CharField(
        min_length=3,
        max_length=32,
        error_messages={'min_length': PHRASE_LENGTH_ERROR, 'max_length': PHRASE_LENGTH_ERROR},
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'New phrase'}),
    )
    category = forms.ChoiceField(required=False, choices=())
    new_category = forms.CharField(
        required=False,
        max_length=64,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Or a new category'}),
    )

    def __init__(self, *args, phrase_list=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.phrase_list = phrase_list
        names = phrase_list.category_names if phrase_list else []
        self.fields['category'].choices = [('', '---------')] + [(name, name) for name in names]

    def clean(self):
        cleaned_data = super().clean()
        text = cleaned_data.get('text')
        category = (cleaned_data.get('new_category') or '').strip() or cleaned_data.get('category')

        if not category:
            raise forms.ValidationError('Select or enter a category.')
        cleaned_data['category_name'] = category

        if text and self.phrase_list is not None and find_duplicate(self.phrase_list, text, category):
            raise forms.ValidationError('Duplicate phrase in category.')
        return cleaned_data


class ImportPhrasesForm(forms.Form):
    phrase_file = forms.FileField(help_text="JSON file exported from the phrase manager")

    def clean(self):
        cleaned_data = super().clean()
        phrase_file = cleaned_data.get('phrase_file')
        if phrase_file:
            try:
                cleaned_data['phrase_list'] = parse_phrase_import(phrase_file.read())
            except ImportParseError as e:
                raise forms.ValidationError(f"Import failed: {e}")
        return cleaned_data
