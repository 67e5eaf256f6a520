"""Concurrent rendering -- one template, 8 threads.

The reentrancy guard lives in a ContextVar, so each thread tracks its own
in-progress renders. Threads rendering the same template never see each
other as reentrant calls.

Run:
    python app.py
"""

from concurrent.futures import ThreadPoolExecutor

from plume import Template

TEMPLATE_SOURCE = """\
<article id="page-{{page_id}}">
  <h1>{{title}}</h1>
  <ul>{{#tags}}<li>{{tag}}</li>{{/tags}}</ul>
  {{*footer}}
</article>"""

template = Template(TEMPLATE_SOURCE, escape="html")
templates = {"footer": "<footer>{{title}}</footer>"}

pages = [
    {
        "page_id": i,
        "title": f"Page {i}",
        "tags": [{"tag": f"tag-{i}-{letter}"} for letter in "abc"],
    }
    for i in range(8)
]


def render_page(page: dict) -> str:
    """Render a single page -- called from a worker thread."""
    return template.render(page, templates=templates)


with ThreadPoolExecutor(max_workers=8) as pool:
    results = list(pool.map(render_page, pages))

output = "\n".join(results)


def main() -> None:
    print(f"Rendered {len(results)} pages across 8 threads:\n")
    for i, html in enumerate(results):
        print(f"--- Thread {i} ---")
        print(html)
        print()


if __name__ == "__main__":
    main()
