"""Shared fixtures: a small reference page in the shape of the Bot API docs."""

import pytest

from apigen.htmlutil import parse_document
from apigen.lib import EntrySegmenter


def heading(name: str) -> str:
    anchor = name.lower()
    return (
        f'<h4><a class="anchor" name="{anchor}" href="#{anchor}">'
        f'<i class="anchor-icon"></i></a>{name}</h4>'
    )


FIELD_HEADER = "<thead><tr><th>Field</th><th>Type</th><th>Description</th></tr></thead>"
PARAM_HEADER = (
    "<thead><tr><th>Parameter</th><th>Type</th><th>Required</th>"
    "<th>Description</th></tr></thead>"
)

SAMPLE_PAGE = f"""<!DOCTYPE html>
<html>
<head><title>Bot API</title></head>
<body>
<div id="dev_page_content">
<h3>Available types</h3>
<p>All types used in the Bot API responses are represented as JSON-objects.</p>
{heading("Update")}
<p>This object represents an incoming update.</p>
<blockquote><p>At most <strong>one</strong> of the optional parameters can be present.</p></blockquote>
<table class="table">
{FIELD_HEADER}
<tbody>
<tr><td>update_id</td><td>Integer</td><td>The update’s unique identifier.</td></tr>
<tr><td>message</td><td><a href="#message">Message</a></td><td><em>Optional</em>. New incoming message of any kind</td></tr>
</tbody>
</table>
{heading("Message")}
<p>This object represents a message.</p>
<table class="table">
{FIELD_HEADER}
<tbody>
<tr><td>message_id</td><td>Integer</td><td>Unique message identifier</td></tr>
<tr><td>photo</td><td>Array of <a href="#photosize">PhotoSize</a></td><td><em>Optional</em>. Available sizes of the photo</td></tr>
<tr><td>reply_markup</td><td><a href="#inlinekeyboardmarkup">InlineKeyboardMarkup</a></td><td><em>Optional</em>. Inline keyboard attached to the message</td></tr>
</tbody>
</table>
{heading("PhotoSize")}
<p>This object represents one size of a photo.</p>
<table class="table">
{FIELD_HEADER}
<tbody>
<tr><td>file_id</td><td>String</td><td>Identifier for this file</td></tr>
<tr><td>width</td><td>Integer</td><td>Photo width</td></tr>
</tbody>
</table>
{heading("InputFile")}
<p>This object represents the contents of a file to be uploaded.</p>
<h3>Available methods</h3>
{heading("getMe")}
<p>A simple method for testing your bot’s authentication token. Requires no parameters. Returns basic information about the bot in form of a <a href="#user">User</a> object.</p>
{heading("sendMessage")}
<p>Use this method to send text messages. On success, the sent <a href="#message">Message</a> is returned.</p>
<table class="table">
{PARAM_HEADER}
<tbody>
<tr><td>chat_id</td><td>Integer or String</td><td>Yes</td><td>Unique identifier for the target chat</td></tr>
<tr><td>text</td><td>String</td><td>Yes</td><td>Text of the message to be sent</td></tr>
<tr><td>reply_markup</td><td><a href="#inlinekeyboardmarkup">InlineKeyboardMarkup</a> or <a href="#forcereply">ForceReply</a></td><td>Optional</td><td>Additional interface options</td></tr>
</tbody>
</table>
{heading("getUpdates")}
<p>Use this method to receive incoming updates using long polling. An Array of <a href="#update">Update</a> objects is returned.</p>
<table class="table">
{PARAM_HEADER}
<tbody>
<tr><td>offset</td><td>Integer</td><td>Optional</td><td>Identifier of the first update to be returned</td></tr>
<tr><td>allowed_updates</td><td>Array of String</td><td>Optional</td><td>A JSON-serialized list of the update types</td></tr>
</tbody>
</table>
</div>
</body>
</html>
"""


@pytest.fixture
def sample_page() -> str:
    return SAMPLE_PAGE


@pytest.fixture
def sample_root():
    return parse_document(SAMPLE_PAGE)


@pytest.fixture
def segmenter():
    return EntrySegmenter(heading_selector="h4", anchor_selector="a.anchor")


@pytest.fixture
def parsed_sample(sample_root, segmenter):
    body = sample_root.query_selector("div#dev_page_content")
    return segmenter.parse(body)


@pytest.fixture
def config_file(tmp_path):
    """Write a config.yaml pointing the output at tmp_path/out."""

    def write(extra: str = "") -> str:
        path = tmp_path / "config.yaml"
        path.write_text(
            "parser:\n"
            "  body_selector: div#dev_page_content\n"
            "  heading_selector: h4\n"
            "  anchor_selector: a.anchor\n"
            "output:\n"
            f"  dir: {tmp_path / 'out'}\n"
            + extra
        )
        return str(path)

    return write
