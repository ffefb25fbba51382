from datetime import UTC, datetime

from sharenote.client.api import AliasServiceError
from sharenote.client.models import AliasNoteData, SharePayload
from sharenote.client.resolver import LinkResolver
from sharenote.codec import encode

BASE_URL = "https://notes.example.com"


def make_token(title: str = "Hi", content: str = "# Hi\n\nworld") -> str:
    return encode(SharePayload(title=title, content=content).to_json())


class StubAliasClient:
    def __init__(self, records: dict[str, AliasNoteData] | None = None, error: Exception | None = None) -> None:
        self.records = records or {}
        self.error = error

    async def get(self, alias: str) -> AliasNoteData | None:
        if self.error is not None:
            raise self.error
        return self.records.get(alias)


def alias_record(token: str, views: int = 1) -> AliasNoteData:
    return AliasNoteData(data=token, title="Hi", created_at=datetime.now(UTC), views=views)


class TestEmbeddedLinks:
    async def test_view_link(self):
        note = await LinkResolver().resolve(f"{BASE_URL}/view?d={make_token()}")
        assert note.title == "Hi"
        assert note.content == "# Hi\n\nworld"
        assert note.embed is False
        assert note.views is None

    async def test_embed_flag(self):
        note = await LinkResolver().resolve(f"{BASE_URL}/view?d={make_token()}&embed=true")
        assert note.embed is True

    async def test_invalid_token(self):
        assert await LinkResolver().resolve(f"{BASE_URL}/view?d=@@@") is None

    async def test_token_that_is_not_a_payload(self):
        assert await LinkResolver().resolve(f"{BASE_URL}/view?d={encode('just text')}") is None

    async def test_empty_fields_get_defaults(self):
        token = encode('{"t": "", "c": "", "d": "not a date"}')
        note = await LinkResolver().resolve(f"{BASE_URL}/view?d={token}")
        assert note.title == "Shared Note"
        assert note.content == ""


class TestAliasLinks:
    async def test_alias_link(self):
        client = StubAliasClient({"my-note": alias_record(make_token(), views=3)})
        note = await LinkResolver(alias_client=client).resolve(f"{BASE_URL}/my-note")

        assert note.alias == "my-note"
        assert note.views == 3
        assert note.content == "# Hi\n\nworld"

    async def test_unknown_alias(self):
        resolver = LinkResolver(alias_client=StubAliasClient())
        assert await resolver.resolve(f"{BASE_URL}/missing") is None

    async def test_store_failure(self):
        resolver = LinkResolver(alias_client=StubAliasClient(error=AliasServiceError("HTTP 500", 500)))
        assert await resolver.resolve(f"{BASE_URL}/my-note") is None

    async def test_view_paths_are_not_aliases(self):
        client = StubAliasClient({"view": alias_record(make_token())})
        resolver = LinkResolver(alias_client=client)
        assert await resolver.resolve(f"{BASE_URL}/view") is None
        assert await resolver.resolve(f"{BASE_URL}/a/b") is None

    async def test_no_alias_client(self):
        assert await LinkResolver().resolve(f"{BASE_URL}/my-note") is None


class TestBasePath:
    async def test_alias_under_path_prefix(self):
        client = StubAliasClient({"my-note": alias_record(make_token())})
        resolver = LinkResolver(alias_client=client, base_url="https://host/notes/")

        note = await resolver.resolve("https://host/notes/my-note")
        assert note.alias == "my-note"

    async def test_view_link_under_path_prefix(self):
        resolver = LinkResolver(base_url="https://host/notes")
        note = await resolver.resolve(f"https://host/notes/view?d={make_token()}")
        assert note.title == "Hi"

    async def test_other_prefix_is_not_an_alias(self):
        client = StubAliasClient({"my-note": alias_record(make_token())})
        resolver = LinkResolver(alias_client=client, base_url="https://host/notes")
        assert await resolver.resolve("https://host/other/my-note") is None
