"""Tests for feed entry serialization helpers."""

from datetime import datetime, timedelta, timezone

from podsync.feed.models import (
    cdata,
    enclosure_type,
    enclosure_url,
    format_pub_date,
    xml_text,
)


def test_xml_text_escapes_markup_and_quotes():
    assert xml_text('a & b <c> "d"') == "a &amp; b &lt;c&gt; &quot;d&quot;"


def test_cdata_splits_terminator():
    assert cdata("x]]>y") == "<![CDATA[x]]]]><![CDATA[>y]]>"


def test_cdata_splits_comment_opener():
    assert cdata("a <!-- b") == "<![CDATA[a <!-]]><![CDATA[- b]]>"


def test_format_pub_date_fixed_width():
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=-5)))

    assert format_pub_date(moment) == "02/01/2024 03:04:05 -0500"


def test_format_pub_date_naive_gets_local_offset():
    rendered = format_pub_date(datetime(2024, 1, 2, 3, 4, 5))

    assert rendered.startswith("02/01/2024 03:04:05 ")
    assert rendered[-5] in "+-"


def test_enclosure_type_by_format():
    assert enclosure_type("mp3") == "audio/mpeg"
    assert enclosure_type("M4A") == "audio/mp4"
    assert enclosure_type("mp4") == "video/mpeg"


def test_enclosure_url():
    assert (
        enclosure_url("http://host/", "UCchan", "abc123", "mp4")
        == "http://host/podcasts/UCchan/abc123.mp4"
    )
