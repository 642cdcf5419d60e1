def submit(client, headers, payload):
    res = client.post("/high-scores", json=payload, headers=headers)
    assert res.status_code == 201
    return res


def test_submit_and_query_by_level(client, auth_headers, make_score):
    submit(client, auth_headers, make_score(level="A", score=10))
    submit(client, auth_headers, make_score(level="A", score=50))
    submit(client, auth_headers, make_score(level="B", score=99))

    res = client.get("/high-scores", params={"level": "A"})
    assert res.status_code == 200
    assert [s["score"] for s in res.json()] == [50, 10]

    res = client.get("/high-scores", params={"level": "B", "page": 1})
    assert [s["score"] for s in res.json()] == [99]

    res = client.get("/high-scores", params={"level": "A", "page": 2})
    assert res.status_code == 200
    assert res.json() == []


def test_scores_are_returned_as_submitted(client, auth_headers, make_score):
    payload = make_score(level="A", score=7, timestamp="2024-03-05T08:30:00.123+02:00")
    submit(client, auth_headers, payload)
    assert client.get("/high-scores", params={"level": "A"}).json() == [payload]


def test_second_page_starts_at_21st_entry(client, auth_headers, make_score):
    for value in range(25):
        submit(client, auth_headers, make_score(level="A", score=value))

    first = client.get("/high-scores", params={"level": "A"}).json()
    second = client.get("/high-scores", params={"level": "A", "page": 2}).json()
    assert [s["score"] for s in first] == list(range(24, 4, -1))
    assert [s["score"] for s in second] == [4, 3, 2, 1, 0]


def test_duplicate_submissions_both_persist(client, auth_headers, make_score, app):
    submit(client, auth_headers, make_score(score=30))
    submit(client, auth_headers, make_score(score=30))
    assert len(app.state.ledger) == 2
    assert len(client.get("/high-scores", params={"level": "A"}).json()) == 2


def test_score_for_unregistered_handle_is_accepted(client, auth_headers, make_score):
    submit(client, auth_headers, make_score(handle="ghost-player"))
    scores = client.get("/high-scores", params={"level": "A"}).json()
    assert scores[0]["userHandle"] == "ghost-player"


def test_missing_timestamp_is_rejected(client, auth_headers, make_score):
    payload = make_score()
    del payload["timestamp"]
    res = client.post("/high-scores", json=payload, headers=auth_headers)
    assert res.status_code == 400
    errors = res.json()["errors"]
    assert any(err["loc"][-1] == "timestamp" and err["type"] == "missing" for err in errors)


def test_invalid_score_payloads(client, auth_headers, make_score):
    bad_payloads = [
        make_score(score="10"),
        make_score(score=10.5),
        make_score(timestamp="yesterday"),
        make_score(timestamp="2024-13-01T10:00:00Z"),
        make_score(timestamp="2024-01-01T10:00:00"),
        dict(make_score(), extra=1),
    ]
    for payload in bad_payloads:
        res = client.post("/high-scores", json=payload, headers=auth_headers)
        assert res.status_code == 400, payload
        assert res.json()["errors"]


def test_integral_float_score_is_accepted(client, auth_headers, make_score):
    submit(client, auth_headers, make_score(score=10.0))
    scores = client.get("/high-scores", params={"level": "A"}).json()
    assert scores[0]["score"] == 10
    assert isinstance(scores[0]["score"], int)


def test_boolean_score_is_rejected(client, auth_headers, make_score):
    res = client.post("/high-scores", json=make_score(score=True), headers=auth_headers)
    assert res.status_code == 400
    assert any(err["loc"][-1] == "score" for err in res.json()["errors"])


def test_accepted_timestamp_formats(client, auth_headers, make_score):
    timestamps = [
        "2024-01-01T10:00:00+0200",
        "2024-01-01T10:00:00+02",
        "2024-01-01t10:00:00z",
        "2024-01-01 10:00:00.5-05:30",
        "2024-06-30T23:59:60Z",
        "2024-07-01T01:59:60+02:00",
        "2024-02-29T00:00:00Z",
    ]
    for timestamp in timestamps:
        res = client.post("/high-scores", json=make_score(timestamp=timestamp), headers=auth_headers)
        assert res.status_code == 201, timestamp


def test_rejected_timestamp_formats(client, auth_headers, make_score):
    timestamps = [
        "2024-06-30T12:00:60Z",
        "2024-01-01T10:00:61Z",
        "2024-01-01T10:00:00+24:00",
        "2024-01-01T10:00:00+02:60",
        "2023-02-29T00:00:00Z",
        "2024-01-01T10:00:00+2",
    ]
    for timestamp in timestamps:
        res = client.post("/high-scores", json=make_score(timestamp=timestamp), headers=auth_headers)
        assert res.status_code == 400, timestamp


def test_query_requires_level(client):
    res = client.get("/high-scores")
    assert res.status_code == 400
    assert res.json() == {"message": "Level is required"}

    res = client.get("/high-scores", params={"level": ""})
    assert res.status_code == 400


def test_query_unknown_level_is_empty(client):
    res = client.get("/high-scores", params={"level": "nowhere"})
    assert res.status_code == 200
    assert res.json() == []


def test_query_rejects_non_integer_page(client):
    res = client.get("/high-scores", params={"level": "A", "page": "two"})
    assert res.status_code == 400
    assert any(err["loc"][-1] == "page" for err in res.json()["errors"])
