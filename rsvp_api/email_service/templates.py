import html
import re
from dataclasses import dataclass

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def merge_placeholders(
    template: str, values: dict[str, str], escape: bool = False, raw_keys: frozenset[str] = frozenset()
) -> str:
    """Replace ``{{name}}`` placeholders in a single pass.

    Unknown placeholders are left untouched. With ``escape`` every value except
    those named in ``raw_keys`` is HTML-escaped.
    """

    def replace(match: re.Match) -> str:
        key = match.group(1)
        if key not in values:
            return match.group(0)
        value = str(values[key])
        return html.escape(value) if escape and key not in raw_keys else value

    return PLACEHOLDER_PATTERN.sub(replace, template)


@dataclass
class EmailTemplates:
    INVITATION_SUBJECT = "You're invited to {{occasionName}}"
    INVITATION_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #171717; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="color: #ec4899; text-align: center;">Dear {{firstName}} {{lastName}},</h1>

        <p>We are delighted to invite you to {{occasionName}}. Please RSVP using the button below.</p>

        <div style="background-color: #fdf2f8; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <h2 style="color: #be185d; margin-top: 0;">You are invited to</h2>
            <ul>{{eventList}}</ul>
        </div>

        <div style="text-align: center; margin: 30px 0;">
            <a href="{{rsvpLink}}" style="background-color: #ec4899; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; font-size: 18px;">
                RSVP Now
            </a>
        </div>

        <p>Or use this RSVP code: <strong>{{loginCode}}</strong></p>

        <p>With love,<br>{{hosts}}</p>
    </body>
    </html>
    """

    INVITATION_TEXT = """
    Dear {{firstName}} {{lastName}},

    We are delighted to invite you to {{occasionName}}.

    You are invited to:
    {{eventListText}}

    Please RSVP here: {{rsvpLink}}
    Or use this RSVP code: {{loginCode}}

    With love,
    {{hosts}}
    """

    @classmethod
    def get_invitation_templates(cls) -> tuple[str, str, str]:
        """Return (subject, html, text) of the built-in invitation."""
        return cls.INVITATION_SUBJECT, cls.INVITATION_HTML, cls.INVITATION_TEXT
