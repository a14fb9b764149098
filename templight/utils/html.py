import html

from ..engine.tokens import Token, stringify


def css_classes(token):
    classes = ["token", token.kind.value]
    for alias in token.alias:
        if alias not in classes:
            classes.append(alias)
    return " ".join(classes)


def render_html(tokens):
    """
    Render a token tree as nested ``<span class="token ...">`` elements.

    Args:
        tokens: A list of tokens and raw strings, or a single item.
    """
    if isinstance(tokens, str):
        return html.escape(tokens, quote=False)
    if isinstance(tokens, Token):
        if isinstance(tokens.content, str):
            inner = html.escape(tokens.content, quote=False)
        else:
            inner = render_html(tokens.content)
        return f'<span class="{css_classes(tokens)}">{inner}</span>'
    return "".join(render_html(item) for item in tokens)


def render_document(tokens, language_id="templ", title=None):
    """Wrap rendered tokens in a minimal standalone HTML page."""
    title = html.escape(title or language_id)
    body = render_html(tokens)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        f"<head><meta charset=\"utf-8\"><title>{title}</title></head>\n"
        "<body>\n"
        f"<pre class=\"language-{language_id}\"><code class=\"language-{language_id}\">{body}</code></pre>\n"
        "</body>\n"
        "</html>\n"
    )


def tokens_to_data(tokens):
    """JSON-friendly form of a token tree; raw strings stay strings."""
    if isinstance(tokens, str):
        return tokens
    if isinstance(tokens, Token):
        data = {"type": tokens.kind.value}
        if tokens.alias:
            data["alias"] = list(tokens.alias)
        if isinstance(tokens.content, str):
            data["content"] = tokens.content
        else:
            data["content"] = tokens_to_data(tokens.content)
        return data
    return [tokens_to_data(item) for item in tokens]


def source_text(tokens):
    """The source text a token tree was produced from."""
    return stringify(tokens)
