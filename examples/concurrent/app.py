"""Concurrent rendering -- one cached template set, many threads.

Every thread renders the same view/layout pair, so all of them share one
cached template set. The child view handed to ``view()`` lives in a
per-render context, so no thread ever sees another thread's page.

Run:
    python app.py
"""

from concurrent.futures import ThreadPoolExecutor

from stencil import Engine, MemoryFS

fs = MemoryFS(
    {
        "layout.tpl": '<section id="page-{{ page_id }}">{{ view() }}</section>',
        "article.tpl": (
            "<h1>{{ title }}</h1>"
            "<ul>{% for tag in tags %}<li>{{ tag }}</li>{% endfor %}</ul>"
        ),
    }
)
engine = Engine(fs, cache=True)
engine.load()

pages = [
    {"page_id": i, "title": f"Page {i}", "tags": [f"tag-{i}-a", f"tag-{i}-b", f"tag-{i}-c"]}
    for i in range(32)
]


def render_page(page: dict) -> str:
    """Render a single page -- called from a worker thread."""
    return engine.compile("article", "layout", page).decode("utf-8")


with ThreadPoolExecutor(max_workers=8) as pool:
    results = list(pool.map(render_page, pages))

output = "\n".join(results)


def main() -> None:
    print(f"Rendered {len(results)} pages across 8 threads:\n")
    for html in results:
        print(html)


if __name__ == "__main__":
    main()
