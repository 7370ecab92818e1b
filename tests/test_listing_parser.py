import pytest

from core.pipeline import MalformedCapabilityOutput, normalize_listing_fields, parse_listing_text


def test_parses_fenced_json_surrounded_by_prose():
    text = (
        "Here is your listing:\n"
        "```json\n"
        '{"title": "Blue Pottery Vase", "region": "Rajasthan", "description": "Hand painted."}\n'
        "```\n"
        "Hope this helps!"
    )
    listing = parse_listing_text(text)
    assert listing == {"title": "Blue Pottery Vase", "region": "Rajasthan", "description": "Hand painted."}


def test_bare_json():
    assert parse_listing_text('{"title": "Madhubani Painting"}') == {"title": "Madhubani Painting"}


def test_fence_markers_inside_the_object_are_removed():
    assert parse_listing_text('{"title": "```json\nVase```"}') == {"title": "Vase"}


@pytest.mark.parametrize("text", [
    "",
    None,
    "Sorry, I cannot help with that.",
    '{"title": "Unclosed"',
    "[1, 2, 3]",
    # The first brace belongs to the prose, so the cut span is not JSON
    'Use {braces} carefully: {"title": "Vase"}',
])
def test_unparseable_text_is_malformed(text):
    with pytest.raises(MalformedCapabilityOutput) as exc_info:
        parse_listing_text(text)
    assert exc_info.value.http_status == 500


def test_missing_and_falsy_fields_get_defaults():
    listing = normalize_listing_fields({"title": "Kantha Stole", "region": None, "features": []})
    assert listing == {
        "title": "Kantha Stole",
        "region": "",
        "description": "",
        "features": [],
    }


def test_extra_fields_are_dropped():
    listing = normalize_listing_fields({"title": "T", "price": "999", "features": ["Handmade"]})
    assert listing == {"title": "T", "region": "", "description": "", "features": ["Handmade"]}
