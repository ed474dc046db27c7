"""
AttributionRecord helper tests.
"""
from utm_attribution.models.attribution import AttributionRecord, CONTEXT_KEYS


# ---------------------------------------------------------------------------
# Attachment rule
# ---------------------------------------------------------------------------

def test_empty_record_is_not_attached():
    assert not AttributionRecord().is_attached()


def test_source_or_origin_attaches():
    assert AttributionRecord(source="google").is_attached()
    assert AttributionRecord(from_="Direct").is_attached()


def test_medium_alone_does_not_attach():
    assert not AttributionRecord(medium="cpc", time=1, landing_page="/").is_attached()


# ---------------------------------------------------------------------------
# Cookie / context views
# ---------------------------------------------------------------------------

def test_cookie_items_skip_empty_fields_and_stringify_time():
    record = AttributionRecord(source="google", term="", from_="Direct", time=1700000000, landing_page="/landing")
    assert record.cookie_items() == [
        ("u_source", "google"),
        ("u_from", "Direct"),
        ("u_time", "1700000000"),
        ("u_lp", "%2Flanding"),
    ]


def test_context_items_cover_all_eight_keys_in_order():
    keys = [key for key, _ in AttributionRecord(source="google").context_items()]
    assert keys == [
        "utm.source", "utm.medium", "utm.term", "utm.content", "utm.campaign",
        "utm.from", "utm.time", "utm.lp",
    ]


def test_from_cookies_reads_stored_values():
    record = AttributionRecord.from_cookies({
        "u_source": "google",
        "u_campaign": "",
        "u_from": "https://ref.example.com/",
        "u_time": "1700000000",
        "u_lp": "/landing",
        "session": "ignored",
    })
    assert record.source == "google"
    assert record.campaign is None
    assert record.from_ == "https://ref.example.com/"
    assert record.time == 1700000000
    assert record.landing_page == "/landing"


def test_from_cookies_decodes_percent_encoding():
    record = AttributionRecord.from_cookies({
        "u_source": "%E2%82%AC",
        "u_from": "https%3A%2F%2Fref.example.com%2Fa%20b",
    })
    assert record.source == "€"
    assert record.from_ == "https://ref.example.com/a b"


def test_cookie_items_encode_non_latin1_values():
    assert AttributionRecord(campaign="春季").cookie_items() == [("u_campaign", "%E6%98%A5%E5%AD%A3")]


def test_from_cookies_ignores_unparseable_time():
    assert AttributionRecord.from_cookies({"u_time": "yesterday"}).time is None


def test_from_context_round_trips_injected_keys():
    record = AttributionRecord(source="google", from_="Direct", time=5, landing_page="/x")
    scope = {"type": "http", **dict(record.context_items())}
    assert AttributionRecord.from_context(scope) == record


def test_from_context_without_keys_is_none():
    assert AttributionRecord.from_context({"type": "http", "path": "/"}) is None


def test_dump_uses_from_alias():
    dumped = AttributionRecord(from_="Direct").model_dump(by_alias=True)
    assert dumped["from"] == "Direct"
    assert set(CONTEXT_KEYS) - {"from_"} <= set(dumped)
