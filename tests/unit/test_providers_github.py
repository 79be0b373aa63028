"""Tests for file_pr_viewer/providers/github_rest.py."""

import json
from datetime import UTC, datetime

import httpx
import pytest

from file_pr_viewer.exceptions import AuthenticationError, GitHubAPIError, GitHubServerError, RateLimitError
from file_pr_viewer.models.domain import PullRequestState
from file_pr_viewer.providers.github_rest import GitHubPullPayload, GitHubRestClient
from file_pr_viewer.utils.connection_pool import API_VERSION

SHA = "0123456789abcdef0123456789abcdef01234567"


def pull(number: int, **overrides):
    payload = {
        "number": number,
        "title": f"PR {number}",
        "html_url": f"https://github.com/acme/widgets/pull/{number}",
        "state": "closed",
        "user": {"login": "jdoe"},
        "merged_at": "2024-03-01T10:00:00Z",
        "updated_at": "2024-03-02T10:00:00Z",
    }
    payload.update(overrides)
    return payload


def client_for(handler, **kwargs) -> GitHubRestClient:
    return GitHubRestClient(token="ghp_test", transport=httpx.MockTransport(handler), **kwargs)


class TestGitHubPullPayload:
    """Test validation of the API's pull objects."""

    def test_full_payload(self, identity):
        record = GitHubPullPayload.model_validate(pull(42)).to_record(identity)

        assert record.number == 42
        assert record.title == "PR 42"
        assert record.url == "https://github.com/acme/widgets/pull/42"
        assert record.state is PullRequestState.CLOSED
        assert record.author == "jdoe"
        assert record.merged_at == datetime(2024, 3, 1, 10, tzinfo=UTC)
        assert record.updated_at == datetime(2024, 3, 2, 10, tzinfo=UTC)

    def test_missing_optional_fields(self, identity):
        record = GitHubPullPayload.model_validate({"number": 7}).to_record(identity)

        assert record.title == ""
        assert record.url == "https://github.com/acme/widgets/pull/7"
        assert record.state is PullRequestState.UNKNOWN
        assert record.author is None
        assert record.merged_at is None
        assert record.updated_at is None

    def test_malformed_optional_fields_become_none(self, identity):
        payload = pull(8, title=None, user="ghost", merged_at="yesterday", updated_at=12, state="draft")

        record = GitHubPullPayload.model_validate(payload).to_record(identity)

        assert record.title == ""
        assert record.author is None
        assert record.merged_at is None
        assert record.updated_at is None
        assert record.state is PullRequestState.UNKNOWN

    def test_number_required(self):
        with pytest.raises(ValueError):
            GitHubPullPayload.model_validate({"title": "no number"})


class TestListPullsForCommit:
    """Test the commits/{sha}/pulls lookup."""

    @pytest.mark.asyncio
    async def test_request_shape(self, identity):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[pull(42)])

        async with client_for(handler) as client:
            records = await client.list_pulls_for_commit(identity, SHA)

        assert [r.number for r in records] == [42]
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == f"/repos/acme/widgets/commits/{SHA}/pulls"
        assert request.url.host == "api.github.com"
        assert request.headers["Authorization"] == "Bearer ghp_test"
        assert request.headers["Accept"] == "application/vnd.github+json"
        assert request.headers["X-GitHub-Api-Version"] == API_VERSION

    @pytest.mark.asyncio
    async def test_enterprise_api_url(self, identity):
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json=[])

        async with client_for(handler, api_url="https://ghe.example.com/api/v3/") as client:
            await client.list_pulls_for_commit(identity, SHA)

        assert str(seen[0]) == f"https://ghe.example.com/api/v3/repos/acme/widgets/commits/{SHA}/pulls"

    @pytest.mark.asyncio
    async def test_empty_response(self, identity):
        async with client_for(lambda request: httpx.Response(200, json=[])) as client:
            assert await client.list_pulls_for_commit(identity, SHA) == []

    @pytest.mark.asyncio
    async def test_keeps_service_order(self, identity):
        async with client_for(lambda request: httpx.Response(200, json=[pull(3), pull(1), pull(2)])) as client:
            records = await client.list_pulls_for_commit(identity, SHA)

        assert [r.number for r in records] == [3, 1, 2]

    @pytest.mark.asyncio
    async def test_invalid_entries_skipped(self, identity):
        body = [pull(1), {"title": "missing number"}, "garbage", pull(2)]

        async with client_for(lambda request: httpx.Response(200, json=body)) as client:
            records = await client.list_pulls_for_commit(identity, SHA)

        assert [r.number for r in records] == [1, 2]

    @pytest.mark.asyncio
    async def test_non_list_payload(self, identity):
        async with client_for(lambda request: httpx.Response(200, json={"message": "odd"})) as client:
            with pytest.raises(GitHubAPIError, match="expected a list"):
                await client.list_pulls_for_commit(identity, SHA)

    @pytest.mark.asyncio
    async def test_malformed_json(self, identity):
        async with client_for(lambda request: httpx.Response(200, content=b"{not json")) as client:
            with pytest.raises(GitHubAPIError, match="Malformed JSON"):
                await client.list_pulls_for_commit(identity, SHA)

    @pytest.mark.asyncio
    async def test_unauthorized(self, identity):
        async with client_for(lambda request: httpx.Response(401, json={"message": "Bad credentials"})) as client:
            with pytest.raises(AuthenticationError) as exc_info:
                await client.list_pulls_for_commit(identity, SHA)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_rate_limited(self, identity):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                403,
                headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1712000000"},
                json={"message": "API rate limit exceeded"},
            )

        async with client_for(handler) as client:
            with pytest.raises(RateLimitError) as exc_info:
                await client.list_pulls_for_commit(identity, SHA)

        assert exc_info.value.reset_at == 1712000000

    @pytest.mark.asyncio
    async def test_forbidden_without_rate_limit(self, identity):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, headers={"x-ratelimit-remaining": "4999"}, json={"message": "Forbidden"})

        async with client_for(handler) as client:
            with pytest.raises(GitHubAPIError) as exc_info:
                await client.list_pulls_for_commit(identity, SHA)

        assert not isinstance(exc_info.value, RateLimitError)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_not_found(self, identity):
        async with client_for(lambda request: httpx.Response(404, json={"message": "Not Found"})) as client:
            with pytest.raises(GitHubAPIError) as exc_info:
                await client.list_pulls_for_commit(identity, SHA)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_not_connected(self, identity):
        client = client_for(lambda request: httpx.Response(200, json=[]))

        with pytest.raises(ConnectionError):
            await client.list_pulls_for_commit(identity, SHA)


class TestRetry:
    """Test retry of transient failures."""

    @pytest.mark.asyncio
    async def test_no_retry_by_default(self, identity):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectError("connection refused", request=request)

        async with client_for(handler) as client:
            with pytest.raises(httpx.ConnectError):
                await client.list_pulls_for_commit(identity, SHA)

        assert calls == 1

    @pytest.mark.asyncio
    async def test_retries_transport_errors_and_server_errors(self, identity, monkeypatch):
        monkeypatch.setattr("file_pr_viewer.utils.retry.asyncio.sleep", _no_sleep)
        responses = iter(["connect", 502, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            step = next(responses)
            if step == "connect":
                raise httpx.ConnectError("connection reset", request=request)
            if step == 502:
                return httpx.Response(502, text="Bad Gateway")
            return httpx.Response(200, content=json.dumps([pull(5)]).encode())

        async with client_for(handler, retry_attempts=3) as client:
            records = await client.list_pulls_for_commit(identity, SHA)

        assert [r.number for r in records] == [5]

    @pytest.mark.asyncio
    async def test_server_error_after_retries(self, identity, monkeypatch):
        monkeypatch.setattr("file_pr_viewer.utils.retry.asyncio.sleep", _no_sleep)

        async with client_for(lambda request: httpx.Response(503), retry_attempts=2) as client:
            with pytest.raises(GitHubServerError):
                await client.list_pulls_for_commit(identity, SHA)

    @pytest.mark.asyncio
    async def test_client_errors_not_retried(self, identity):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(404)

        async with client_for(handler, retry_attempts=3) as client:
            with pytest.raises(GitHubAPIError):
                await client.list_pulls_for_commit(identity, SHA)

        assert calls == 1


async def _no_sleep(delay: float) -> None:
    return None
