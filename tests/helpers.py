"""
Builders for fake listing pages, detail pages and the icon sprite.
"""

import io

import httpx
from PIL import Image


LISTING_URL = "https://listing.test/tv-programm/sendungen/abends.html"
ICONS_URL = "https://listing.test/images/sprite.png"
DETAIL_URL = "https://listing.test/tv-programm/sendung/tatort.html"
ICON_SIZE = 4

# One solid color per sprite tile, in ICON_ORDER order
TILE_COLORS = [
    (255, 0, 0, 255),
    (0, 255, 0, 255),
    (0, 0, 255, 255),
]


def build_row(
    channel="ZDF Programm",
    title="Tatort",
    genre=" Krimi ",
    division=" Spielfilm Krimi ",
    link_title="Krimi, D 2019",
    href=DETAIL_URL,
):
    """Render one listing row; pass None to leave a part out."""
    channel_cell = (
        f'<td class="programm-col1"><a title="{channel}" href="#">x</a></td>'
        if channel is not None
        else '<td class="programm-col1"></td>'
    )
    link_attrs = ""
    if link_title is not None:
        link_attrs += f' title="{link_title}"'
    if href is not None:
        link_attrs += f' href="{href}"'
    title_cell = (
        f'<td class="col-3"><span><a{link_attrs}><strong>{title}</strong></a></span></td>'
        if title is not None
        else f'<td class="col-3"><span><a{link_attrs}></a></span></td>'
    )
    genre_cell = f'<td class="col-4"><span>{genre}</span></td>' if genre is not None else ""
    division_cell = (
        f'<td class="col-5"><span>{division}</span></td>' if division is not None else ""
    )
    return f'<tr class="hover">{channel_cell}{title_cell}{genre_cell}{division_cell}</tr>'


def build_listing(rows):
    """Wrap rows into a page matching the listing row selector."""
    return (
        "<html><head><title>TV</title></head><body>"
        '<div id="wrapper"><div id="main"><div class="content-area"><div id="content">'
        '<div class="tvlistings"><div class="content-holder"><div class="tab-content">'
        '<table class="info-table"><tbody>'
        + "".join(rows)
        + "</tbody></table></div></div></div></div></div></div></div></body></html>"
    )


def build_detail_page(paragraphs):
    body = "".join(f"<p>{paragraph}</p>" for paragraph in paragraphs)
    return (
        '<html><body><div id="content"><div><div><article>'
        f'<section class="broadcast-detail__description">{body}</section>'
        "</article></div></div></div></body></html>"
    )


def build_sprite_bytes():
    sprite = Image.new("RGBA", (ICON_SIZE, ICON_SIZE * len(TILE_COLORS)))
    for index, color in enumerate(TILE_COLORS):
        tile = Image.new("RGBA", (ICON_SIZE, ICON_SIZE), color)
        sprite.paste(tile, (0, index * ICON_SIZE))
    buffer = io.BytesIO()
    sprite.save(buffer, format="PNG")
    return buffer.getvalue()


class FakeSite:
    """Serves canned responses through httpx.MockTransport and records requests."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []

    def handler(self, request):
        url = str(request.url)
        self.requests.append(url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route
        # Fresh response per request, the client consumes and closes it
        return httpx.Response(route.status_code, headers=route.headers, content=route.content)

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)

    def serve_listing(self, rows):
        self.routes[LISTING_URL] = httpx.Response(200, text=build_listing(rows))

    def requested(self, url):
        return self.requests.count(url)
