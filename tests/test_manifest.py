"""Tests for the manifest description."""

import dataclasses
import json
from datetime import datetime, timezone

import pytest

from signatureapp.modules.manifest import (
    CLAIM_GENERATOR,
    CREATED_ACTION,
    DIGITAL_CREATION,
    ManifestDescription,
    build_manifest,
    note_for,
)

FIXED_NOW = datetime(2026, 3, 14, 15, 9, 26, tzinfo=timezone.utc)


def _build(author="Jane Doe", signature="Jane's Mark"):
    return build_manifest(author, signature, "image/jpeg", clock=lambda: FIXED_NOW)


def test_fields():
    m = _build()
    assert m.title == "Jane Doe – Authenticated Image"
    assert m.format == "image/jpeg"
    assert m.claim_generator == CLAIM_GENERATOR == "SignatureApp/1.0"
    assert m.author_name == "Jane Doe"
    assert m.note_summary == "Signed via SignatureApp. Signature: Jane's Mark"


def test_single_created_action():
    m = _build()
    assert len(m.actions) == 1
    action = m.actions[0]
    assert action.action_type == CREATED_ACTION
    assert action.software_agent == CLAIM_GENERATOR
    assert action.timestamp == "2026-03-14T15:09:26+00:00"
    assert action.digital_source_type == DIGITAL_CREATION


def test_default_clock_is_utc_now():
    before = datetime.now(timezone.utc)
    m = build_manifest("Jane", "abc", "image/jpeg")
    stamp = datetime.fromisoformat(m.actions[0].timestamp)
    assert stamp.tzinfo is not None
    assert stamp >= before


def test_signature_text_embedded_verbatim():
    text = '{0} <b>"quoted"</b> & {signature}'
    assert _build(signature=text).note_summary == note_for(text)
    assert note_for(text).endswith(text)


def test_description_is_immutable():
    m = _build()
    with pytest.raises(dataclasses.FrozenInstanceError):
        m.title = "changed"


def test_deterministic_for_fixed_clock():
    assert _build() == _build()
    assert _build().to_json() == _build().to_json()


def test_definition_for_builder():
    definition = json.loads(_build().to_json())
    assert definition["title"] == "Jane Doe – Authenticated Image"
    assert definition["claim_generator"] == "SignatureApp/1.0"
    assert definition["claim_generator_info"] == [{"name": "SignatureApp", "version": "1.0"}]

    by_label = {a["label"]: a["data"] for a in definition["assertions"]}
    assert list(by_label) == ["c2pa.actions", "c2pa.author", "c2pa.note"]
    assert by_label["c2pa.actions"]["actions"] == [
        {
            "action": "c2pa.created",
            "digitalSourceType": "http://cv.iptc.org/newscodes/digitalsourcetype/digitalCreation",
            "softwareAgent": "SignatureApp/1.0",
            "when": "2026-03-14T15:09:26+00:00",
        }
    ]
    assert by_label["c2pa.author"] == {"name": "Jane Doe"}
    assert by_label["c2pa.note"] == {"summary": "Signed via SignatureApp. Signature: Jane's Mark"}


def test_is_manifest_description():
    assert isinstance(_build(), ManifestDescription)
