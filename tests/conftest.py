"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path


@pytest.fixture
def account_page() -> str:
    """Account management page showing the user hash."""
    return """
    <html><body>
      <div class="notesmall">
        <p><b>Your userhash is:</b>  abc123</p>
        <p><b>Your account was created:</b> 2023-01-01</p>
      </div>
    </body></html>
    """


@pytest.fixture
def logged_out_page() -> str:
    """Account management page as served to an anonymous visitor."""
    return """
    <html><body>
      <div class="notesmall"><p>Please log in to manage your account.</p></div>
    </body></html>
    """


@pytest.fixture
def albums_page() -> str:
    """Album management page listing two albums and one broken entry."""
    return """
    <html><body>
      <div class="album"><span class="textHolder">https://catbox.moe/c/hpxdlu</span></div>
      <div class="album"><span class="textHolder">not a url</span></div>
      <div class="album"><span class="textHolder">https://catbox.moe/c/q8w2zk</span></div>
      <span class="other">https://catbox.moe/c/ignored</span>
    </body></html>
    """


@pytest.fixture
def files_page() -> str:
    """File view page listing the user's uploads."""
    return """
    <html><body>
      <div id="results"><a href="https://files.catbox.moe/6r38xu.pdf" target="_blank">6r38xu.pdf</a><a href="https://catbox.moe/user/view.php?page=2">next</a><a href="https://files.catbox.moe/k2l9qa.png" target="_blank">k2l9qa.png</a></div>
    </body></html>
    """


@pytest.fixture
def album_page() -> str:
    """Public album page with two files."""
    return """
    <html><body>
      <div class="imagecontainer"><video src="https://host/a.mp4"></video><img src="https://host/b.jpg"></div>
    </body></html>
    """


@pytest.fixture
def upload_files(tmp_path: Path) -> list[Path]:
    """Create three small files to upload.

    Structure:
        temp_dir/
            photo1.jpg
            clip2.mp4
            notes3.txt
    """
    files = []
    for name, content in [
        ("photo1.jpg", b"fake jpg content"),
        ("clip2.mp4", b"fake mp4 content, a bit longer"),
        ("notes3.txt", b"notes"),
    ]:
        path = tmp_path / name
        path.write_bytes(content)
        files.append(path)
    return files


@pytest.fixture
def credentials() -> tuple[str, str]:
    """Return a fake username and password for testing."""
    return "kyle", "some_password"
