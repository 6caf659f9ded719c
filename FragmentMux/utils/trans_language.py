# 30.09.26

import dataclasses
from typing import Optional, Tuple


# Variable
UNDETERMINED = "und"

# ISO 639-2 code -> display name
LANGUAGE_NAMES = {
    "ita":  "Italian",
    "eng":  "English",
    "jpn":  "Japanese",
    "ger":  "German",
    "fre":  "French",
    "spa":  "Spanish",
    "por":  "Portuguese",
    "rus":  "Russian",
    "ara":  "Arabic",
    "chi":  "Chinese",
    "kor":  "Korean",
    "hin":  "Hindi",
    "tur":  "Turkish",
    "pol":  "Polish",
    "dut":  "Dutch",
    "swe":  "Swedish",
    "fin":  "Finnish",
    "nor":  "Norwegian",
    "dan":  "Danish",
    "cat":  "Catalan",
    "rum":  "Romanian",
    "cze":  "Czech",
    "hun":  "Hungarian",
    "gre":  "Greek",
    "heb":  "Hebrew",
    "tha":  "Thai",
    "vie":  "Vietnamese",
    "ind":  "Indonesian",
    "may":  "Malay",
    "ukr":  "Ukrainian",
}

LANGUAGE_CODES = {

    # --- ISO 639-1 (2 char) ---
    "it":   "ita",
    "en":   "eng",
    "ja":   "jpn",
    "de":   "ger",
    "fr":   "fre",
    "es":   "spa",
    "pt":   "por",
    "ru":   "rus",
    "ar":   "ara",
    "zh":   "chi",
    "ko":   "kor",
    "hi":   "hin",
    "tr":   "tur",
    "pl":   "pol",
    "nl":   "dut",
    "sv":   "swe",
    "fi":   "fin",
    "nb":   "nor",
    "no":   "nor",
    "da":   "dan",
    "ca":   "cat",
    "ro":   "rum",
    "cs":   "cze",
    "hu":   "hun",
    "el":   "gre",
    "he":   "heb",
    "th":   "tha",
    "vi":   "vie",
    "id":   "ind",
    "ms":   "may",
    "uk":   "ukr",

    # --- ISO 639-2/T variants ---
    "deu":  "ger",
    "fra":  "fre",
    "zho":  "chi",
    "nld":  "dut",
    "ron":  "rum",
    "ces":  "cze",
    "ell":  "gre",
    "msa":  "may",
    "nob":  "nor",

    # --- lowercase names ---
    "italian":      "ita",
    "english":      "eng",
    "japanese":     "jpn",
    "german":       "ger",
    "french":       "fre",
    "spanish":      "spa",
    "portuguese":   "por",
    "russian":      "rus",
    "arabic":       "ara",
    "chinese":      "chi",
    "korean":       "kor",
    "hindi":        "hin",
    "turkish":      "tur",
    "polish":       "pol",
    "dutch":        "dut",
    "swedish":      "swe",
    "finnish":      "fin",
    "norwegian":    "nor",
    "danish":       "dan",
    "catalan":      "cat",
    "romanian":     "rum",
    "czech":        "cze",
    "hungarian":    "hun",
    "greek":        "gre",
    "hebrew":       "heb",
    "thai":         "tha",
    "vietnamese":   "vie",
    "indonesian":   "ind",
    "malay":        "may",
    "ukrainian":    "ukr",
}


def resolve_language(lang: Optional[str]) -> Tuple[str, Optional[str]]:
    """
    Normalize a raw language tag.

    Parameters:
        - lang (str): Tag such as "en", "en-US", "eng" or "English".

    Returns:
        tuple: (code, display name). Unknown tags are returned unchanged with no
        display name, missing tags become "und".
    """
    if not lang or not isinstance(lang, str) or not lang.strip():
        return UNDETERMINED, None

    tag = lang.strip()
    key = tag.lower()
    if key in LANGUAGE_NAMES:
        return key, LANGUAGE_NAMES[key]

    primary = key.replace('_', '-').split('-')[0]
    code = LANGUAGE_CODES.get(key) or LANGUAGE_CODES.get(primary)
    if code is None and primary in LANGUAGE_NAMES:
        code = primary
    if code is None:
        return tag, None

    return code, LANGUAGE_NAMES.get(code)


def convert_lang_code_and_display_name(track):
    """Return a copy of the track with a normalized language code and a title when it had none."""
    code, display_name = resolve_language(track.language)
    description = track.description or display_name
    return dataclasses.replace(track, language=code, description=description)
