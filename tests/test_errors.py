from __future__ import annotations

from labelcycle.errors import classify_error, redact
from labelcycle.github_rest import GitHubAPIError


def test_classify_rate_limit_status():
    info = classify_error(GitHubAPIError('GitHub API POST failed with 429', status=429))
    assert info.category == 'github.rate_limit'
    assert info.transient is True
    assert info.details == {'status': 429}


def test_classify_forbidden_rate_limit_text():
    info = classify_error(
        GitHubAPIError('failed with 403', status=403, response_text='API rate limit exceeded')
    )
    assert info.category == 'github.rate_limit'


def test_classify_auth():
    info = classify_error(GitHubAPIError('failed with 401', status=401))
    assert info.category == 'github.auth'
    assert info.transient is False


def test_classify_not_found():
    assert classify_error(GitHubAPIError('missing', status=404)).category == 'github.not_found'


def test_classify_server():
    info = classify_error(GitHubAPIError('failed with 502', status=502))
    assert info.category == 'github.server'
    assert info.transient is True


def test_classify_rate_limit_text():
    info = classify_error(RuntimeError('API Rate Limit Exceeded'))
    assert info.category == 'github.rate_limit'
    assert info.transient is True


def test_classify_abuse():
    info = classify_error(RuntimeError('Abuse detection triggered'))
    assert info.category == 'github.abuse'


def test_classify_network():
    info = classify_error(RuntimeError('Connection reset by peer'))
    assert info.category == 'network'
    assert info.transient is True


def test_classify_generic():
    info = classify_error(ValueError('Some other problem'))
    assert info.category == 'generic'
    assert info.original_type == 'ValueError'
    assert info.as_log_fields() == {
        'category': 'generic',
        'transient': False,
        'error_type': 'ValueError',
    }


def test_redact_tokens():
    sample = (
        "Token ghp_ABCDEFGHIJKLMNOPQRSTUVWX plus github_pat_1234567890abcdefghijkl "
        "and header Bearer abcdefghijklmnopqrstuvwxyz"
    )
    out = redact(sample)
    assert 'ghp_' not in out
    assert 'github_pat_' not in out
    assert 'abcdefghijklmnopqrstuvwxyz' not in out
    assert '<redacted>' in out


def test_classified_message_is_redacted():
    info = classify_error(RuntimeError('bad token ghp_ABCDEFGHIJKLMNOPQRSTUVWX'))
    assert 'ghp_' not in info.message
