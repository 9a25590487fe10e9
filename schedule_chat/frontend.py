from __future__ import annotations

from .config import FRONTEND_DIR

_FALLBACK_HTML = """<!doctype html><html><head><meta charset="utf-8"><title>AI Calendar</title></head><body>
<form id="chat"><textarea name="text" placeholder="e.g. Study Python for 1 hour every day at 9am"></textarea><button type="submit">Schedule</button></form>
<pre id="out"></pre>
<script>
document.getElementById("chat").addEventListener("submit", async (e) => {
  e.preventDefault();
  const btn = e.target.querySelector("button");
  btn.disabled = true;
  try {
    const res = await fetch("/api/schedule", {method: "POST", headers: {"Content-Type": "application/json"}, body: JSON.stringify({text: e.target.text.value})});
    document.getElementById("out").textContent = JSON.stringify(await res.json(), null, 2);
  } finally {
    btn.disabled = false;
  }
});
</script></body></html>"""


def _load_frontend_html(filename: str) -> str:
    path = FRONTEND_DIR / filename
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return _FALLBACK_HTML


INDEX_HTML = _load_frontend_html("index.html")
