"""Manifest description for a sign request.

The author name and signature text are user input, recorded as assertions
and never checked against any identity. The note carries the signature text
verbatim.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

APP_NAME = "SignatureApp"
APP_VERSION = "1.0"
CLAIM_GENERATOR = f"{APP_NAME}/{APP_VERSION}"

ACTIONS_LABEL = "c2pa.actions"
AUTHOR_LABEL = "c2pa.author"
NOTE_LABEL = "c2pa.note"

CREATED_ACTION = "c2pa.created"
# c2pa refuses a c2pa.created action without a digital source type
DIGITAL_CREATION = "http://cv.iptc.org/newscodes/digitalsourcetype/digitalCreation"
TITLE_SUFFIX = " – Authenticated Image"
NOTE_TEMPLATE = "Signed via " + APP_NAME + ". Signature: {signature}"


@dataclass(frozen=True)
class Action:
    action_type: str
    software_agent: str
    timestamp: str
    digital_source_type: str = DIGITAL_CREATION


@dataclass(frozen=True)
class ManifestDescription:
    title: str
    format: str
    claim_generator: str
    actions: tuple[Action, ...]
    author_name: str
    note_summary: str

    def to_definition(self) -> dict:
        """Render the manifest definition the c2pa ``Builder`` expects."""
        return {
            "title": self.title,
            "format": self.format,
            "claim_generator": self.claim_generator,
            "claim_generator_info": [{"name": APP_NAME, "version": APP_VERSION}],
            "assertions": [
                {
                    "label": ACTIONS_LABEL,
                    "data": {
                        "actions": [
                            {
                                "action": a.action_type,
                                "digitalSourceType": a.digital_source_type,
                                "softwareAgent": a.software_agent,
                                "when": a.timestamp,
                            }
                            for a in self.actions
                        ]
                    },
                },
                {"label": AUTHOR_LABEL, "data": {"name": self.author_name}},
                {"label": NOTE_LABEL, "data": {"summary": self.note_summary}},
            ],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_definition())


def note_for(signature: str) -> str:
    return NOTE_TEMPLATE.format(signature=signature)


def build_manifest(
    author: str,
    signature: str,
    mime_type: str,
    clock: Optional[Callable[[], datetime]] = None,
) -> ManifestDescription:
    now = (clock or (lambda: datetime.now(timezone.utc)))()
    return ManifestDescription(
        title=f"{author}{TITLE_SUFFIX}",
        format=mime_type,
        claim_generator=CLAIM_GENERATOR,
        actions=(Action(CREATED_ACTION, CLAIM_GENERATOR, now.isoformat()),),
        author_name=author,
        note_summary=note_for(signature),
    )
