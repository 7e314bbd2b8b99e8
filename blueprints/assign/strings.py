from __future__ import annotations
from typing import Any

STRINGS: dict[str, dict[str, str]] = {
    "assignsubmission_link": {
        "pluginname": "Link submission",
        "formaterrormessage": "The link does not have a valid format. Enter a full address such as https://www.example.com",
        "numwords": "({a} words)",
        "numwordsforlog": "Submission has {a} words",
        "portfolioexport": "Export to portfolio",
    },
    "mod_assign": {
        "couldnotconvertsubmission": "Could not convert submission for user {a}",
        "upgradenotsupported": "Upgrade from {a} is not supported",
        "submissionsaved": "Your submission has been saved",
    },
}

def get_string(identifier: str, component: str, a: Any = None) -> str:
    try:
        s = STRINGS[component][identifier]
    except KeyError:
        return f"[[{identifier}]]"
    if a is not None:
        s = s.format(a=a)
    return s
