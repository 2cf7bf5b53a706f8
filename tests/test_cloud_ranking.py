"""Tests for cloud candidate ranking and the Rekognition client."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from celeb_lookalike.core.exceptions import UpstreamUnavailableError
from celeb_lookalike.ml.celebrity_api import (
    CelebrityCandidate,
    RekognitionCelebrityClient,
    candidate_from_face,
)
from celeb_lookalike.pipelines.cloud_ranking import (
    normalize_gender,
    rank_candidates,
    recognize_with_cloud,
)


@pytest.fixture
def candidates():
    return [
        CelebrityCandidate("A", 80.0, gender="Male"),
        CelebrityCandidate("B", 60.0, gender="Female"),
    ]


class TestRankCandidates:

    def test_gender_and_threshold(self, candidates):
        ranked = rank_candidates(candidates, min_confidence=50, gender="female")
        assert [c.name for c in ranked] == ["B"]

    def test_threshold_excludes_all(self, candidates):
        assert rank_candidates(candidates, min_confidence=90) == []

    def test_threshold_is_inclusive(self, candidates):
        assert [c.name for c in rank_candidates(candidates, min_confidence=60)] == ["A", "B"]

    def test_sorted_descending(self):
        ranked = rank_candidates([
            CelebrityCandidate("Low", 10.0),
            CelebrityCandidate("High", 95.5),
            CelebrityCandidate("Mid", 50.0),
        ])
        assert [c.name for c in ranked] == ["High", "Mid", "Low"]

    def test_ties_keep_provider_order(self):
        ranked = rank_candidates([
            CelebrityCandidate("First", 70.0),
            CelebrityCandidate("Second", 70.0),
            CelebrityCandidate("Top", 99.0),
        ])
        assert [c.name for c in ranked] == ["Top", "First", "Second"]

    def test_no_filters_drops_nothing(self, candidates):
        assert len(rank_candidates(candidates)) == len(candidates)

    @pytest.mark.parametrize("gender", [None, "", "any", "ANY"])
    def test_any_gender_disables_filter(self, candidates, gender):
        assert len(rank_candidates(candidates, gender=gender)) == 2

    def test_gender_filter_drops_unknown_gender(self):
        ranked = rank_candidates([CelebrityCandidate("Nobody", 90.0)], gender="male")
        assert ranked == []

    def test_empty_input(self):
        assert rank_candidates([], min_confidence=10, gender="male") == []

    def test_normalize_gender(self):
        assert normalize_gender(" Female ") == "female"
        assert normalize_gender("any") is None


class TestRecognizeWithCloud:

    def test_response_shape(self, candidates):
        client = MagicMock()
        client.recognize.return_value = candidates

        result = recognize_with_cloud(client, b"img", min_confidence=50, gender="Female")

        client.recognize.assert_called_once_with(b"img")
        assert result.to_response() == {
            "candidates": [{
                "name": "B",
                "confidence": 60.0,
                "gender": "Female",
                "urls": [],
                "id": None,
            }],
            "usedGender": "female",
            "threshold": 50.0,
        }

    def test_defaults(self, candidates):
        client = MagicMock()
        client.recognize.return_value = candidates

        result = recognize_with_cloud(client, b"img")
        assert result.used_gender == "any"
        assert result.threshold == 0.0
        assert [c.name for c in result.candidates] == ["A", "B"]


class TestRekognitionClient:

    def test_parses_celebrity_faces(self):
        boto_client = MagicMock()
        boto_client.recognize_celebrities.return_value = {
            "CelebrityFaces": [{
                "Name": "Keanu Reeves",
                "Id": "abc123",
                "MatchConfidence": 99.1,
                "KnownGender": {"Type": "Male"},
                "Urls": ["www.imdb.com/name/nm0000206"],
            }],
            "UnrecognizedFaces": [],
        }

        client = RekognitionCelebrityClient(client=boto_client)
        found = client.recognize(b"img")

        boto_client.recognize_celebrities.assert_called_once_with(Image={"Bytes": b"img"})
        assert found == [CelebrityCandidate(
            "Keanu Reeves", 99.1, gender="Male",
            urls=("www.imdb.com/name/nm0000206",), id="abc123",
        )]

    def test_no_faces(self):
        boto_client = MagicMock()
        boto_client.recognize_celebrities.return_value = {}
        assert RekognitionCelebrityClient(client=boto_client).recognize(b"img") == []

    def test_client_error_is_upstream_unavailable(self):
        boto_client = MagicMock()
        boto_client.recognize_celebrities.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "denied"}},
            "RecognizeCelebrities",
        )
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            RekognitionCelebrityClient(client=boto_client).recognize(b"img")
        assert exc_info.value.service == "rekognition"

    def test_connection_error_is_upstream_unavailable(self):
        boto_client = MagicMock()
        boto_client.recognize_celebrities.side_effect = EndpointConnectionError(
            endpoint_url="https://rekognition.us-east-1.amazonaws.com"
        )
        with pytest.raises(UpstreamUnavailableError):
            RekognitionCelebrityClient(client=boto_client).recognize(b"img")

    def test_candidate_without_optional_fields(self):
        candidate = candidate_from_face({"Name": "Someone", "MatchConfidence": 51})
        assert candidate.gender is None
        assert candidate.urls == ()
        assert candidate.confidence == 51.0
