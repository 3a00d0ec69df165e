from newsrss.news.dates import DateParser
from newsrss.news.source.registry import news_source


RTE = news_source(
    name="RTE",
    base_url="https://www.rte.ie/",
    listing_path="/news/",
    article_selector=":not(.av-box) ~ .article-meta",
    headline_selector="span.underline",
    link_selector="a",
    body_selector="section.article-body",
    image_selector=None,
    date_selector="span.modified-date",
    # e.g. "Updated / Monday, 3 Jan 2022 14:05"; pages without it fall back to now
    parse_date=DateParser(
        "Europe/Dublin",
        ["Updated / %A, %d %b %Y %H:%M"],
        fallback_to_now=True,
    ),
    route_name="rte",
    description="RTÉ News: latest stories from rte.ie",
)
