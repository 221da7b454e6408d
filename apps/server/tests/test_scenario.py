"""End-to-end: stored handover -> PDF bytes, with one unreachable photo."""

from __future__ import annotations

from builders import GENERATED_ON, SCENARIO_BROKEN_URL, FakeImageLoader, seed_scenario
from conftest import extract_pdf_text, pdf_page_texts

from handover.config import report_config_from_mapping
from handover.handover_db import HandoverDB
from handover.reports import generate_report


def _generate(handover_db: HandoverDB, loader: FakeImageLoader):
    handover_id = seed_scenario(handover_db)
    return generate_report(
        handover_id,
        store=handover_db,
        fetcher=loader,
        settings=report_config_from_mapping(
            {"company_name": "Northside Motors", "company_phone": "0113 496 0000"}
        ),
        generated_on=GENERATED_ON,
    )


def test_scenario_report_layout(handover_db: HandoverDB) -> None:
    loader = FakeImageLoader(failing={SCENARIO_BROKEN_URL})
    result = _generate(handover_db, loader)

    assert result.filename == "AB12CDE-handover.pdf"
    layout = result.layout
    assert layout is not None
    assert len(layout.checklist_rows) == 15
    assert len(layout.tyre_rows) == 4
    assert layout.comment_box_pages == [0]

    photos = layout.photos
    assert photos is not None
    assert photos.groups == [("Exterior", 2), ("Interior", 2), ("Damage", 1)]
    assert [p.loaded for p in photos.placements] == [True, True, True, True, False]
    assert photos.placements[4].caption == "Damage - Door ding"
    assert photos.signature is not None
    assert photos.signature.loaded
    assert photos.signature.page_index == result.page_count - 1

    # Signature fetched last, after every grid photo.
    assert loader.requested[0][-1] == "https://photos.example.test/sig.png"


def test_scenario_report_text(handover_db: HandoverDB) -> None:
    result = _generate(handover_db, FakeImageLoader(failing={SCENARIO_BROKEN_URL}))

    text = extract_pdf_text(result.content)
    for expected in (
        "Northside Motors",
        "Vehicle Handover Report",
        "AB12CDE",
        "42,150",
        "14/03/2026",
        "Horn working",
        "Run Flat",
        "Other Comments",
        "intermittent parking sensor fault",
        "[Photo could not be loaded]",
        "Customer Signature",
    ):
        assert expected in text, expected

    pages = pdf_page_texts(result.content)
    assert len(pages) == result.page_count
    for i, page_text in enumerate(pages, start=1):
        assert f"Page {i} of {result.page_count}" in page_text


def test_scenario_is_stable_across_runs(handover_db: HandoverDB, tmp_path) -> None:
    first = _generate(handover_db, FakeImageLoader(failing={SCENARIO_BROKEN_URL}))
    other_db = HandoverDB(tmp_path / "second.db")
    try:
        second = _generate(other_db, FakeImageLoader(failing={SCENARIO_BROKEN_URL}))
    finally:
        other_db.close()
    assert first.layout == second.layout
    assert pdf_page_texts(first.content) == pdf_page_texts(second.content)
