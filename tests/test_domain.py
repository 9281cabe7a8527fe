"""Tests for the domain layer."""

import pytest

from zgit.domain import (
    RepositoryDescriptor,
    NoTag,
    Tag,
    parse_tag_prefix,
    is_tag_token,
    InspectionResult,
    ChangeCounts,
    StatusRow,
    ErrorEntry,
    StatusReport,
    CANCELLED_MESSAGE,
)


class TestTagSelector:
    """Tests for @tag parsing."""

    def test_parse_tag(self):
        assert parse_tag_prefix("@api") == Tag("api")

    @pytest.mark.parametrize("token", ["", "@", "api", "status", None])
    def test_non_tags(self, token):
        assert parse_tag_prefix(token) == NoTag()
        assert not is_tag_token(token)

    def test_only_leading_at_is_stripped(self):
        assert parse_tag_prefix("@@x") == Tag("@x")

    def test_truthiness(self):
        assert not NoTag()
        assert NoTag().name == ""
        assert Tag("web")


class TestRepositoryDescriptor:
    """Tests for RepositoryDescriptor."""

    @pytest.fixture
    def repos(self):
        return [
            RepositoryDescriptor("plain", "/src/plain"),
            RepositoryDescriptor("api-a", "/src/api-a", "api"),
            RepositoryDescriptor("api-b", "/src/api-b", "api"),
            RepositoryDescriptor("site", "/src/site", "web"),
        ]

    def test_filter_by_tag(self, repos):
        selected = [r for r in repos if r.matches("api")]
        assert [r.name for r in selected] == ["api-a", "api-b"]

    @pytest.mark.parametrize("selector", ["", None, NoTag()])
    def test_empty_filter_selects_all(self, repos, selector):
        assert all(r.matches(selector) for r in repos)

    def test_tag_selector_object(self, repos):
        assert [r.name for r in repos if r.matches(Tag("web"))] == ["site"]

    def test_untagged_never_matches_tag(self, repos):
        assert not repos[0].matches("plain")

    def test_from_path(self):
        repo = RepositoryDescriptor.from_path("/home/someone/src/zgit", tag="tools")
        assert repo.name == "zgit"
        assert repo.location == "/home/someone/src/zgit"
        assert repo.tag == "tools"

    def test_dict_round_trip_tolerates_missing_tag(self):
        repo = RepositoryDescriptor.from_dict({'name': 'x', 'location': '/x'})
        assert repo.tag == ""
        assert repo.to_dict() == {'name': 'x', 'location': '/x', 'tag': ''}


class TestChangeCounts:
    """Tests for ChangeCounts formatting."""

    def test_format(self):
        assert ChangeCounts(new=2, modified=1, deleted=0).format() == "+2 ~1 -0"
        assert str(ChangeCounts(deleted=1)) == "+0 ~0 -1"

    def test_zero_is_empty_string(self):
        counts = ChangeCounts()
        assert counts.empty
        assert counts.format() == ""

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            ChangeCounts(new=-1)


class TestInspectionResult:
    """Tests for InspectionResult."""

    def test_text_decoding(self):
        result = InspectionResult(stdout=b"main\n", stderr=b"  warn \xff\n")
        assert result.text == "main"
        assert result.error_text == "warn �"

    def test_cancelled(self):
        assert InspectionResult(failed=True, message=CANCELLED_MESSAGE).cancelled
        assert not InspectionResult(failed=True, message="exit status 1").cancelled
        assert not InspectionResult(message=CANCELLED_MESSAGE).cancelled


class TestReport:
    """Tests for StatusRow, ErrorEntry and StatusReport."""

    def test_placeholder(self):
        assert ErrorEntry(3, "boom").placeholder == "See Error: 3"

    def test_report_to_dict(self):
        row = StatusRow("api", "main", "v1", "", "+0 ~1 -0", "/src/api")
        report = StatusReport(rows=[row], errors=[ErrorEntry(1, "boom", "detail")])

        data = report.to_dict()
        assert data['rows'][0]['ref'] == "v1"
        assert data['errors'][0] == {'index': 1, 'message': 'boom', 'detail': 'detail'}
        assert data['cancelled'] is False
        assert not report.success
        assert StatusReport().success
