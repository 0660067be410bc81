"""
Shell Router - the single-page presentation shell.

Open http://localhost:8000/ in a browser. The page:
1. Sends the question to /api/preview and /api/explain at the same time
2. Shows the preview text, then the canvas in a sandboxed iframe
3. Records the result in /api/history
4. Exports the canvas through /api/export

Generated canvases are only ever shown with sandbox="" (no scripts).
"""

import html

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from explainer.core.config import settings
from explainer.ai.styles import PRESETS

router = APIRouter(tags=["shell"])


SHELL_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>__APP_NAME__</title>
    <style>
        * { box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
            background: #0f1117;
            color: #e6e6e6;
            margin: 0;
        }
        header { padding: 1.5rem 2rem 0.5rem; }
        h1 { margin: 0; font-size: 1.4rem; color: #7dd3fc; }
        main { display: grid; grid-template-columns: 1fr 300px; gap: 1.5rem; padding: 1rem 2rem 2rem; }
        form { display: flex; flex-wrap: wrap; gap: 0.5rem; align-items: center; }
        input[type=text] { flex: 1 1 420px; padding: 0.7rem 1rem; border-radius: 8px; border: 1px solid #333; background: #181b24; color: inherit; }
        select, button { padding: 0.6rem 0.9rem; border-radius: 8px; border: 1px solid #333; background: #181b24; color: inherit; cursor: pointer; }
        button.primary { background: #0284c7; border-color: #0284c7; }
        button:disabled { opacity: 0.5; cursor: default; }
        .custom { display: flex; gap: 0.5rem; align-items: center; font-size: 0.85rem; }
        #preview { margin: 1rem 0; color: #b4b4b4; line-height: 1.5; min-height: 1.5em; }
        #status { font-size: 0.85rem; color: #f87171; min-height: 1.2em; }
        iframe { width: 100%; height: 75vh; border: 1px solid #222; border-radius: 12px; background: #fff; }
        .exports { margin-top: 0.5rem; display: flex; gap: 0.5rem; }
        aside h2 { font-size: 1rem; margin: 0 0 0.5rem; }
        #usage { font-size: 0.75rem; color: #888; margin-bottom: 0.5rem; }
        .entry { padding: 0.6rem; border: 1px solid #222; border-radius: 8px; margin-bottom: 0.5rem; cursor: pointer; }
        .entry:hover { border-color: #0284c7; }
        .entry small { color: #888; display: block; margin-top: 0.25rem; }
        .entry button { float: right; padding: 0.1rem 0.4rem; font-size: 0.75rem; }
    </style>
</head>
<body>
    <header><h1>__APP_NAME__</h1></header>
    <main>
        <section>
            <form id="ask">
                <input id="question" type="text" maxlength="500" placeholder="Ask anything..." required>
                <select id="detail">
                    <option value="short">Short</option>
                    <option value="balanced" selected>Balanced</option>
                    <option value="detailed">Detailed</option>
                </select>
                <button class="primary" type="submit">Explain</button>
                <label class="custom">
                    <input id="useCustom" type="checkbox"> Custom style
                    <input id="accent" type="color" value="#06b6d4">
                    <select id="mode"><option value="dark">Dark</option><option value="light">Light</option></select>
                    <select id="fonts">__FONT_OPTIONS__</select>
                </label>
            </form>
            <div id="preview"></div>
            <div id="status"></div>
            <iframe id="canvas" sandbox="" title="Explanation"></iframe>
            <div class="exports">
                <button id="exportPng" disabled>Export PNG</button>
                <button id="exportPdf" disabled>Export PDF</button>
            </div>
        </section>
        <aside>
            <h2>History <button id="clear">Clear</button></h2>
            <div id="usage"></div>
            <div id="history"></div>
        </aside>
    </main>
    <script>
        const $ = (id) => document.getElementById(id);
        let current = null;

        async function postJson(url, body) {
            const res = await fetch(url, {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(body),
            });
            const data = await res.json().catch(() => ({}));
            if (!res.ok) {
                const detail = typeof data.detail === 'string' ? data.detail : 'Request failed';
                throw new Error(res.status === 504 ? 'The model did not answer in time. ' + detail : detail);
            }
            return data;
        }

        function show(html) {
            $('canvas').srcdoc = html;
            $('exportPng').disabled = $('exportPdf').disabled = !html;
        }

        async function loadHistory() {
            const [entries, usage] = await Promise.all([
                fetch('/api/history').then((r) => r.json()),
                fetch('/api/history/usage').then((r) => r.json()),
            ]);
            $('usage').textContent =
                `${usage.entryCount} saved, ${(usage.used / 1e6).toFixed(2)} / ${(usage.total / 1e6).toFixed(1)} MB`;
            const list = $('history');
            list.replaceChildren();
            for (const entry of entries) {
                const item = document.createElement('div');
                item.className = 'entry';
                const remove = document.createElement('button');
                remove.textContent = 'x';
                remove.onclick = async (ev) => {
                    ev.stopPropagation();
                    await fetch(`/api/history/${entry.id}`, { method: 'DELETE' });
                    loadHistory();
                };
                const meta = document.createElement('small');
                meta.textContent = `${entry.relativeTime} - ${entry.presetName}`;
                item.append(remove, document.createTextNode(entry.question), meta);
                item.onclick = () => {
                    current = entry;
                    $('question').value = entry.question;
                    $('preview').textContent = entry.previewText || '';
                    show(entry.html);
                };
                list.append(item);
            }
        }

        $('ask').onsubmit = async (ev) => {
            ev.preventDefault();
            const question = $('question').value.trim();
            if (!question) return;
            const body = { question, detailLevel: $('detail').value };
            if ($('useCustom').checked) {
                body.customStyle = { accentColor: $('accent').value, fontPairing: $('fonts').value, mode: $('mode').value };
            }

            $('status').textContent = '';
            $('preview').textContent = 'Thinking...';
            show('');
            let previewText = '';
            const preview = postJson('/api/preview', { question })
                .then((data) => { previewText = data.text; $('preview').textContent = data.text; })
                .catch(() => { $('preview').textContent = ''; });

            try {
                const result = await postJson('/api/explain', body);
                show(result.html);
                await preview;
                current = await postJson('/api/history', {
                    question, html: result.html, previewText, presetName: result.preset,
                    customStyle: body.customStyle, detailLevel: body.detailLevel,
                });
                loadHistory();
            } catch (err) {
                $('status').textContent = err.message;
            }
        };

        async function exportAs(format) {
            if (!current) return;
            $('status').textContent = '';
            try {
                const result = await postJson('/api/export', { html: current.html, format });
                const a = document.createElement('a');
                a.href = result.downloadUrl;
                a.download = result.filename;
                a.click();
            } catch (err) {
                $('status').textContent = 'Export failed. Please try again.';
            }
        }
        $('exportPng').onclick = () => exportAs('png');
        $('exportPdf').onclick = () => exportAs('pdf');
        $('clear').onclick = async () => { await fetch('/api/history', { method: 'DELETE' }); loadHistory(); };

        loadHistory();
    </script>
</body>
</html>
"""


def render_shell_page() -> str:
    font_options = "".join(
        f'<option value="{html.escape(p.name)}">{html.escape(p.fonts.heading)} / {html.escape(p.fonts.body)}</option>'
        for p in PRESETS
    )
    return (
        SHELL_PAGE
        .replace("__APP_NAME__", html.escape(settings.APP_NAME))
        .replace("__FONT_OPTIONS__", font_options)
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def shell_page():
    """Presentation shell: question box, preview, canvas, export and history."""
    return HTMLResponse(content=render_shell_page())
