"""Tests for sitegen.assets."""

from sitegen.assets import is_relative_local, resolve_asset_candidate, rewrite_urls_and_copy_assets


def test_is_relative_local():
    assert is_relative_local("pic.png")
    assert is_relative_local("../pic.png")
    assert not is_relative_local("https://example.com/pic.png")
    assert not is_relative_local("data:image/png;base64,AAAA")
    assert not is_relative_local("/abs.png")
    assert not is_relative_local("#anchor")
    assert not is_relative_local("")


class TestResolveAssetCandidate:
    def test_finds_file_in_assets_dir(self, tmp_path):
        (tmp_path / "assets").mkdir()
        (tmp_path / "assets" / "pic.png").write_bytes(b"x")
        assert resolve_asset_candidate(tmp_path, "pic.png") == (tmp_path / "assets" / "pic.png").resolve()

    def test_rejects_files_outside_root(self, tmp_path):
        root = tmp_path / "content"
        post_dir = root / "blog"
        post_dir.mkdir(parents=True)
        (tmp_path / "outside.txt").write_text("x", encoding="utf-8")

        assert resolve_asset_candidate(post_dir, "../../outside.txt", root=root) is None
        assert resolve_asset_candidate(post_dir, "../../outside.txt") is not None


def test_rewrite_copies_and_prefixes(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "cat.png").write_bytes(b"meow")
    out_assets = tmp_path / "out" / "assets"

    text = rewrite_urls_and_copy_assets(
        '![cat](cat.png) <img src="cat.png"> [other](other.md) [web](https://x.org)',
        src,
        out_assets,
        url_prefix="/blog/cat/",
        root=src,
    )

    [copied] = list(out_assets.iterdir())
    assert f"![cat](/blog/cat/assets/{copied.name})" in text
    assert f'src="/blog/cat/assets/{copied.name}"' in text
    assert "[other](other.md)" in text
    assert "[web](https://x.org)" in text
