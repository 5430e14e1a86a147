"""Localized strings used while importing questions."""

from __future__ import annotations

from canvasqti.config import get_settings

DEFAULT_LOCALE = "en"

STRINGS: dict[str, dict[str, str]] = {
    "en": {
        "defaultname": "Imported question {a}",
        "false": "False",
        "true": "True",
        "notenoughtsubans": (
            "Unable to import matching question '{a}' because a matching question must comprise "
            "at least two questions and three answers."
        ),
        "unknownorunhandledtype": "Unknown or unhandled question type: {a}",
        "calculatedskipped": "Calculated question skipped: {a}",
        "itemfailed": "Unable to import question {a}",
    },
    "fr": {
        "defaultname": "Question importée {a}",
        "false": "Faux",
        "true": "Vrai",
        "notenoughtsubans": (
            "Impossible d'importer la question d'appariement '{a}' : une question d'appariement "
            "doit comporter au moins deux questions et trois réponses."
        ),
        "unknownorunhandledtype": "Type de question inconnu ou non pris en charge : {a}",
        "calculatedskipped": "Question calculée ignorée : {a}",
        "itemfailed": "Impossible d'importer la question {a}",
    },
    "es": {
        "defaultname": "Pregunta importada {a}",
        "false": "Falso",
        "true": "Verdadero",
    },
    "de": {
        "defaultname": "Importierte Frage {a}",
        "false": "Falsch",
        "true": "Wahr",
    },
}


def get_string(key: str, locale: str | None = None, a: object = None) -> str:
    """Resolve ``key`` for ``locale``, falling back to English.

    ``{a}`` in the template is replaced with ``a`` when given.
    """

    resolved_locale = (locale or get_settings().question_locale or DEFAULT_LOCALE).lower()
    table = STRINGS.get(resolved_locale) or STRINGS.get(resolved_locale.split("_")[0], {})
    template = table.get(key) or STRINGS[DEFAULT_LOCALE].get(key)
    if template is None:
        raise KeyError(f"Unknown string identifier: {key}")
    if a is None:
        return template
    return template.replace("{a}", str(a))
