"""Localized error message templates."""

import typing

DEFAULT_CULTURE = "en"

_ENGLISH: dict[str, str] = {
    "NotNullValidator": "'{PropertyName}' must not be empty.",
    "NotEmptyValidator": "'{PropertyName}' must not be empty.",
    "LengthValidator": "'{PropertyName}' must be between {MinLength} and "
    "{MaxLength} characters. You entered {TotalLength} characters.",
    "MinimumLengthValidator": "The length of '{PropertyName}' must be at least "
    "{MinLength} characters. You entered {TotalLength} characters.",
    "MaximumLengthValidator": "The length of '{PropertyName}' must be "
    "{MaxLength} characters or fewer. You entered {TotalLength} characters.",
    "PredicateValidator": "The specified condition was not met for '{PropertyName}'.",
    "AsyncPredicateValidator": "The specified condition was not met for "
    "'{PropertyName}'.",
}

_FRENCH: dict[str, str] = {
    "NotNullValidator": "'{PropertyName}' ne doit pas avoir la valeur null.",
    "NotEmptyValidator": "'{PropertyName}' ne doit pas être vide.",
    "LengthValidator": "'{PropertyName}' doit contenir entre {MinLength} et "
    "{MaxLength} caractères. {TotalLength} caractères ont été saisis.",
    "MinimumLengthValidator": "'{PropertyName}' doit être supérieur ou égal à "
    "{MinLength} caractères. Vous avez saisi {TotalLength} caractères.",
    "MaximumLengthValidator": "'{PropertyName}' doit être inférieur ou égal à "
    "{MaxLength} caractères. Vous avez saisi {TotalLength} caractères.",
    "PredicateValidator": "'{PropertyName}' ne respecte pas la condition fixée.",
    "AsyncPredicateValidator": "'{PropertyName}' ne respecte pas la condition "
    "fixée.",
}


class LanguageManager:
    """Looks up message templates by key for a culture.

    Cultures are matched exactly first, then by their neutral language
    (``fr-CA`` falls back to ``fr``), then English.

    Attributes:
        culture: Culture used when a lookup does not name one (None means English)
        enabled: When False every lookup uses English
    """

    def __init__(self, culture: str | None = None, enabled: bool = True) -> None:
        self.culture = culture
        self.enabled = enabled
        self._languages: dict[str, dict[str, str]] = {
            "en": dict(_ENGLISH),
            "fr": dict(_FRENCH),
        }

    def add_translation(self, culture: str, key: str, message: str) -> None:
        """Register or override one template.

        Args:
            culture: Culture name, e.g. ``"en"`` or ``"de-CH"``
            key: Template key (an error code or validator name)
            message: Template text
        """
        self._languages.setdefault(culture, {})[key] = message

    def get_string(self, key: str, culture: str | None = None) -> str:
        """Return the template for ``key``, or an empty string if untranslated.

        Args:
            key: Template key
            culture: Culture override; defaults to ``self.culture``

        Returns:
            Template text, possibly empty
        """
        for candidate in self._candidate_cultures(culture):
            value = self._languages.get(candidate, {}).get(key)
            if value:
                return value
        return ""

    def _candidate_cultures(self, culture: str | None) -> typing.Iterator[str]:
        if self.enabled:
            culture = culture or self.culture
            if culture:
                yield culture
                if "-" in culture:
                    yield culture.split("-", 1)[0]
        yield DEFAULT_CULTURE
