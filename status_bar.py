import time

from text_width import fit


def render_status(context, width):
    """
    context keys: status_msg, status_until, help_text, position
    """
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    else:
        text = f" {context.get('help_text') or ''}"
        position = context.get("position")
        if position:
            text = f"{text} | {position}"
    return fit(text, width)
