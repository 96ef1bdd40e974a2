"""
오류 분류기 테스트
"""

import pytest

from errors.classifier import ErrorClassifier, detect_browser
from errors.exceptions import AuthenticationError, NetworkError, SecurityError
from errors.models import ErrorCategory, ErrorContext, ErrorSeverity


CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)
FIREFOX_UA = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
SAFARI_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_2) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.2 Safari/605.1.15"
)


class TestErrorClassifier:
    """ErrorClassifier 테스트"""

    def test_content_and_context_tags(self):
        """메시지 내용 태그와 컨텍스트 태그"""
        classifier = ErrorClassifier()
        context = ErrorContext(component="CampaignList", action="load", user_id="u-1")

        result = classifier.classify(
            Exception("fetch failed: network timeout"),
            context,
            ErrorCategory.API,
            ErrorSeverity.HIGH,
        )

        assert result.category == ErrorCategory.API
        assert result.severity == ErrorSeverity.HIGH
        assert result.tags[0] == "api"
        for tag in ("network", "timeout", "component:CampaignList", "action:load", "user:u-1"):
            assert tag in result.tags

    def test_matching_is_case_insensitive(self):
        classifier = ErrorClassifier()

        result = classifier.classify(Exception("NETWORK Unreachable"), ErrorContext())

        assert "network" in result.tags

    def test_auth_and_server_error_tags(self):
        classifier = ErrorClassifier()

        auth = classifier.classify(Exception("Request returned 401 Unauthorized"), ErrorContext())
        server = classifier.classify(Exception("HTTP 500 from upstream"), ErrorContext())

        assert "auth" in auth.tags
        assert "server_error" in server.tags

    def test_defaults_to_system_medium(self):
        """명시 값이 없으면 system/medium"""
        result = ErrorClassifier().classify(ValueError("boom"), ErrorContext())

        assert result.category == ErrorCategory.SYSTEM
        assert result.severity == ErrorSeverity.MEDIUM

    def test_structured_error_attributes(self):
        """AppError 속성 우선 사용"""
        error = NetworkError("upstream refused", code="E_NET")

        result = ErrorClassifier().classify(error, ErrorContext())

        assert result.category == ErrorCategory.API
        assert "code:E_NET" in result.tags
        assert "network" in result.tags

    def test_explicit_arguments_override_structured_error(self):
        error = SecurityError("token replay")

        result = ErrorClassifier().classify(
            error, ErrorContext(), ErrorCategory.AUTH, ErrorSeverity.CRITICAL
        )

        assert result.category == ErrorCategory.AUTH
        assert result.severity == ErrorSeverity.CRITICAL

    def test_security_error_defaults_high(self):
        result = ErrorClassifier().classify(SecurityError("csrf"), ErrorContext())

        assert result.category == ErrorCategory.SECURITY
        assert result.severity == ErrorSeverity.HIGH

    def test_builtin_exception_types(self):
        """내장 예외 유형 태그"""
        classifier = ErrorClassifier()

        assert "timeout" in classifier.classify(TimeoutError(), ErrorContext()).tags
        assert "network" in classifier.classify(ConnectionResetError(), ErrorContext()).tags
        assert "auth" in classifier.classify(PermissionError(), ErrorContext()).tags

    @pytest.mark.parametrize("status_code,tag", [
        (401, "auth"),
        (403, "auth"),
        (429, "rate_limited"),
        (503, "server_error"),
    ])
    def test_status_code_tags(self, status_code, tag):
        error = AuthenticationError("denied", status_code=status_code)

        assert tag in ErrorClassifier().classify(error, ErrorContext()).tags

    def test_browser_tag(self):
        classifier = ErrorClassifier()

        result = classifier.classify(Exception("x"), ErrorContext(user_agent=FIREFOX_UA))

        assert "browser:firefox" in result.tags

    def test_unknown_browser(self):
        result = ErrorClassifier().classify(Exception("x"), ErrorContext())

        assert "browser:unknown" in result.tags

    def test_offline_tag(self):
        offline = ErrorClassifier(is_online=lambda: False)
        online = ErrorClassifier(is_online=lambda: True)

        assert "offline" in offline.classify(Exception("x"), ErrorContext()).tags
        assert "offline" not in online.classify(Exception("x"), ErrorContext()).tags

    def test_tags_are_unique(self):
        error = NetworkError("network down")

        tags = ErrorClassifier().classify(error, ErrorContext()).tags

        assert tags.count("network") == 1

    def test_never_raises(self):
        """내부 실패 시 카테고리 태그만 반환"""

        def broken():
            raise RuntimeError("provider failed")

        classifier = ErrorClassifier(is_online=broken)

        result = classifier.classify(Exception("network"), ErrorContext(), ErrorCategory.UI)

        assert result.tags == ["ui"]

    def test_invalid_category_falls_back(self):
        result = ErrorClassifier().classify(Exception("x"), ErrorContext(), "bogus", "loud")

        assert result.category == ErrorCategory.SYSTEM
        assert result.severity == ErrorSeverity.MEDIUM

    def test_invalid_category_keeps_valid_severity(self):
        """잘못된 축만 기본값으로 대체"""
        result = ErrorClassifier().classify(Exception("x"), ErrorContext(), "databse", "critical")

        assert result.category == ErrorCategory.SYSTEM
        assert result.severity == ErrorSeverity.CRITICAL

    def test_invalid_severity_keeps_valid_category(self):
        result = ErrorClassifier().classify(Exception("x"), ErrorContext(), "security", "urgent")

        assert result.category == ErrorCategory.SECURITY
        assert result.severity == ErrorSeverity.MEDIUM

    def test_message_only_classification(self):
        """로그 엔트리는 error 없이 메시지로 분류"""
        result = ErrorClassifier().classify(
            None, ErrorContext(), ErrorCategory.SYSTEM, ErrorSeverity.LOW,
            message="Network connection lost",
        )

        assert "network" in result.tags


class TestDetectBrowser:
    """User-Agent 브라우저 감지 테스트"""

    def test_known_browsers(self):
        assert detect_browser(CHROME_UA) == "chrome"
        assert detect_browser(FIREFOX_UA) == "firefox"
        assert detect_browser(SAFARI_UA) == "safari"

    def test_empty(self):
        assert detect_browser(None) == "unknown"
        assert detect_browser("") == "unknown"
        assert detect_browser("curl/8.4.0") == "unknown"
