import httpx


def html_response(html: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, text=html, headers={"content-type": "text/html; charset=utf-8"})
