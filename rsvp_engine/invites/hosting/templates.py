class HostedDocumentTemplates:
    RSVP_DOCUMENT_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta http-equiv="refresh" content="0; url={rsvp_url}">
    <title>RSVP</title>
</head>
<body>
    <p>You are invited! Continue to your RSVP:</p>
    <p><a href="{rsvp_url}">{rsvp_url}</a></p>
    <p data-event-id="{event_id}" data-invite-id="{invite_id}"></p>
</body>
</html>
"""
