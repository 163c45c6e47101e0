import pytest

from media_verifier.domain.models import Frame, InlineMedia, ModerationInput
from media_verifier.domain.verdict_parsing import (
    build_moderation_prompt,
    parse_classifier_response,
)


def test_confident_approval_skips_review():
    verdict = parse_classifier_response(
        '{"isApproved": true, "confidence": 0.92, "reason": "Worship song",'
        ' "flags": [], "requiresReview": true}'
    )

    assert verdict.is_approved is True
    assert verdict.confidence == pytest.approx(0.92)
    assert verdict.reason == "Worship song"
    assert verdict.requires_review is False


def test_unsure_approval_goes_to_review():
    verdict = parse_classifier_response(
        '{"isApproved": true, "confidence": 0.55, "flags": [], "requiresReview": false}'
    )

    assert verdict.is_approved is True
    assert verdict.requires_review is True


def test_gospel_flag_overrides_low_confidence():
    verdict = parse_classifier_response(
        '{"isApproved": true, "confidence": 0.5, "flags": ["gospel_music"]}'
    )

    assert verdict.requires_review is False
    assert verdict.flags == {"gospel_music"}


def test_rejection_keeps_review_flag_from_classifier():
    held = parse_classifier_response('{"isApproved": false, "requiresReview": true}')
    final = parse_classifier_response('{"isApproved": false, "confidence": 0.95}')

    assert held.requires_review is True
    assert final.requires_review is False


def test_only_literal_true_approves():
    verdict = parse_classifier_response('{"isApproved": "true", "confidence": 0.9}')

    assert verdict.is_approved is False


def test_json_is_found_inside_surrounding_text():
    raw = 'Here you go:\n```json\n{"isApproved": true, "confidence": 0.9}\n```'

    verdict = parse_classifier_response(raw)

    assert verdict.is_approved is True
    assert verdict.reason == "AI analysis completed"


def test_confidence_defaults_and_clamps():
    assert parse_classifier_response('{"isApproved": false}').confidence == 0.5
    assert parse_classifier_response('{"isApproved": false, "confidence": 7}').confidence == 1.0
    assert parse_classifier_response('{"isApproved": false, "confidence": -1}').confidence == 0.0
    assert (
        parse_classifier_response('{"isApproved": false, "confidence": "high"}').confidence
        == 0.5
    )


def test_zero_confidence_approval_is_kept_and_reviewed():
    verdict = parse_classifier_response('{"isApproved": true, "confidence": 0}')

    assert verdict.confidence == 0.0
    assert verdict.is_approved is True
    assert verdict.requires_review is True


def test_non_list_flags_are_ignored():
    verdict = parse_classifier_response('{"isApproved": false, "flags": "violence"}')

    assert verdict.flags == frozenset()


def test_plain_text_answer_falls_back_to_word_scan():
    approved = parse_classifier_response("This is appropriate Christian content.")
    rejected = parse_classifier_response("Not suitable.")

    assert approved.is_approved is True
    assert approved.confidence == 0.6
    assert approved.requires_review is True
    assert rejected.is_approved is False
    assert rejected.requires_review is True


def test_broken_json_falls_back_to_word_scan():
    verdict = parse_classifier_response('{"isApproved": true, gospel')

    assert verdict.is_approved is True
    assert verdict.reason == "Parsed from text response"


def test_approval_words_need_word_boundaries():
    verdict = parse_classifier_response("inappropriate and unapproved")

    assert verdict.is_approved is False


def test_prompt_lists_metadata_and_truncates_transcript():
    request = ModerationInput(
        title="Morning Devotion",
        description=None,
        content_type="videos",
        transcript="a" * 1500,
        frames=(Frame(timestamp_seconds=1, data=b"x"),),
        thumbnail=InlineMedia(data=b"t", mime_type="image/png"),
    )

    prompt = build_moderation_prompt(request)

    assert '- Title: "Morning Devotion"' in prompt
    assert '- Description: "N/A"' in prompt
    assert "- Content Type: videos" in prompt
    assert ("a" * 1000 + '..."') in prompt
    assert "a" * 1001 not in prompt
    assert "First image = thumbnail" in prompt
    assert "1 frames extracted" in prompt


def test_prompt_without_images_has_no_image_section():
    prompt = build_moderation_prompt(
        ModerationInput(title="Hymn", content_type="music", transcript="Amazing grace")
    )

    assert "Images attached" not in prompt
    assert '- Transcript: "Amazing grace"' in prompt
