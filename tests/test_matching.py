"""Unit tests for sender rules and attachment filters."""

from digpaper.models import EmailRule, EmailFilter
from digpaper.services.matching import (
    normalize_sender,
    sender_matches,
    find_matching_rule,
    filter_matches,
    find_rejecting_filter,
)


def _rule(pattern, project_id=None, active=True):
    return EmailRule(sender_pattern=pattern, project_id=project_id, active=active)


def _filter(pattern, filter_type, active=True):
    return EmailFilter(pattern=pattern, filter_type=filter_type, active=active)


class TestSenderMatching:

    def test_wildcard_matches_domain_suffix_case_insensitive(self):
        assert sender_matches("*@acme.com", "office@ACME.com")

    def test_wildcard_does_not_match_other_domain(self):
        assert not sender_matches("*@acme.com", "office@acme.com.br")

    def test_plain_pattern_is_substring(self):
        assert sender_matches("joao@", "JOAO@cliente.pt")
        assert not sender_matches("maria@", "joao@cliente.pt")

    def test_display_name_is_stripped(self):
        assert normalize_sender("João Silva <Joao@Cliente.PT>") == "joao@cliente.pt"
        assert sender_matches("*@cliente.pt", "João Silva <joao@cliente.pt>")

    def test_blank_pattern_never_matches(self):
        assert not sender_matches("   ", "joao@cliente.pt")

    def test_first_matching_rule_wins(self):
        rules = [_rule("*@acme.com", "p2"), _rule("office@", "p1")]
        assert find_matching_rule(rules, "office@acme.com").project_id == "p2"

    def test_inactive_rules_are_skipped(self):
        rules = [_rule("*@acme.com", "p2", active=False), _rule("office@", "p1")]
        assert find_matching_rule(rules, "office@acme.com").project_id == "p1"

    def test_no_match_returns_none(self):
        assert find_matching_rule([_rule("*@acme.com")], "x@other.org") is None


class TestAttachmentFilters:

    def test_size_max_rejects_smaller_attachments(self):
        assert filter_matches("size_max", "5000", "photo.jpg", 4000)

    def test_size_max_keeps_larger_attachments(self):
        assert not filter_matches("size_max", "5000", "photo.jpg", 6000)
        assert not filter_matches("size_max", "5000", "photo.jpg", 5000)

    def test_size_max_non_numeric_never_matches(self):
        assert not filter_matches("size_max", "big", "photo.jpg", 1)

    def test_extension_with_or_without_dot(self):
        assert filter_matches("extension", "pdf", "report.pdf", 10)
        assert filter_matches("extension", ".PDF", "REPORT.pdf", 10)
        assert not filter_matches("extension", "pdf", "report.pdf.jpg", 10)

    def test_filename_is_case_insensitive_containment(self):
        assert filter_matches("filename", "logo", "Company_LOGO.png", 10)
        assert not filter_matches("filename", "logo", "planta.png", 10)

    def test_unknown_type_never_matches(self):
        assert not filter_matches("regex", ".*", "anything", 10)

    def test_first_rejecting_filter_is_returned(self):
        filters = [
            _filter("signature", "filename", active=False),
            _filter("png", "extension"),
            _filter("5000", "size_max"),
        ]
        rejecting = find_rejecting_filter(filters, "signature.png", 100)
        assert rejecting.filter_type == "extension"

    def test_nothing_rejects(self):
        filters = [_filter("logo", "filename"), _filter("5000", "size_max")]
        assert find_rejecting_filter(filters, "planta.pdf", 20000) is None
