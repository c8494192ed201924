import pytest


def make_entry_html(
    title: str = "",
    href: str = "",
    js_title: str = "",
    score: str | None = None,
    score_fallback: str | None = None,
    members: str | None = None,
    img_attrs: dict[str, str] | None = None,
    info_lines: list[str] | None = None,
) -> str:
    """Build one .seasonal-anime block like the MyAnimeList schedule page."""
    html = '<div class="js-anime-category-producer seasonal-anime js-seasonal-anime">'
    html += '<div class="title"><div class="title-text">'
    html += f'<h2 class="h2_anime_title"><a href="{href}" class="link-title">{title}</a></h2>'
    if js_title:
        html += f'<span class="js-title" style="display:none">{js_title}</span>'
    html += "</div></div>"
    if info_lines is not None:
        html += '<div class="prodsrc"><div class="info">'
        html += "\n".join(f'<span class="item">{line}</span>' for line in info_lines)
        html += "</div></div>"
    if img_attrs is not None:
        attrs = " ".join(f'{k}="{v}"' for k, v in img_attrs.items())
        html += f'<div class="image"><a href="{href}"><img {attrs} alt=""></a></div>'
    html += '<div class="information">'
    if score is not None:
        html += f'<div class="scormem-item score"><span class="js-score">{score}</span></div>'
    elif score_fallback is not None:
        html += f'<div class="scormem-item score">{score_fallback}</div>'
    if members is not None:
        html += f'<div class="scormem-item member"><span class="js-members">{members}</span></div>'
    html += "</div></div>"
    return html


def make_page_html(groups: list[tuple[str, list[str]]]) -> str:
    """Wrap entry blocks in day containers, in the given document order."""
    html = '<html><body><div class="js-categories-seasonal">'
    for key, entries in groups:
        html += f'<div class="seasonal-anime-list js-seasonal-anime-list js-seasonal-anime-list-key-{key}">'
        html += f'<div class="anime-header">{key.title()}</div>'
        html += "".join(entries)
        html += "</div>"
    html += "</div></body></html>"
    return html


FRIEREN = make_entry_html(
    title="Sousou no Frieren 2nd Season",
    href="https://myanimelist.net/anime/59978/Sousou_no_Frieren_2nd_Season",
    score="8.52",
    members="123,456",
    img_attrs={"data-src": "https://cdn.myanimelist.net/images/anime/1921/154528.jpg"},
    info_lines=["Oct 6, 2025", "11 eps, 23 min"],
)

SPY = make_entry_html(
    title="Spy x Family Season 3",
    href="https://myanimelist.net/anime/59027/Spy_x_Family_Season_3",
    score="N/A",
    members="98,765",
    img_attrs={"src": "/images/anime/1506/150426.png"},
    info_lines=["Oct 4, 2025", "? eps, 24 min"],
)

UNTITLED = make_entry_html(href="https://myanimelist.net/anime/1/")


@pytest.fixture
def schedule_page_html() -> str:
    # Sunday appears before Monday in the document on purpose
    return make_page_html([
        ("sunday", [SPY]),
        ("monday", [FRIEREN, UNTITLED]),
        ("other", [UNTITLED]),
    ])
