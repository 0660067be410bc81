"""
In-page scripts used by the canvas renderer.

Each constant is a JavaScript function expression passed to
``page.evaluate`` / ``frame.evaluate`` with a single argument.
"""

# Blank host page. The export content is mounted into it in phase 2.
HOST_PAGE = """<!DOCTYPE html>
<html><head><meta charset="utf-8"></head><body style="margin:0"></body></html>"""

# Phase 1: parse the document in a hidden secondary browsing context.
# Resolves once the frame has loaded (or the ceiling passes).
CREATE_FRAME = """
({ name, html, width, timeoutMs }) => new Promise((resolve) => {
    const frame = document.createElement('iframe');
    frame.name = name;
    frame.setAttribute('data-export-frame', name);
    frame.style.cssText =
        `position:fixed;left:-9999px;top:0;width:${width}px;height:800px;border:0;visibility:hidden;`;
    const timer = setTimeout(resolve, timeoutMs);
    frame.addEventListener('load', () => { clearTimeout(timer); resolve(); });
    frame.srcdoc = html;
    document.body.appendChild(frame);
})
"""

# Bounded wait for webfonts.
WAIT_FOR_FONTS = """
(ceilingMs) => Promise.race([
    document.fonts ? document.fonts.ready : Promise.resolve(),
    new Promise((resolve) => setTimeout(resolve, ceilingMs)),
]).then(() => true)
"""

# Bounded wait for every image to load or error, pooled concurrently.
WAIT_FOR_IMAGES = """
({ ceilingMs, root }) => {
    const scope = root ? document.querySelector(root) : document;
    const images = scope ? Array.from(scope.querySelectorAll('img')) : [];
    return Promise.all(images.map((img) => new Promise((resolve) => {
        if (img.complete && img.naturalWidth > 0) { resolve(); return; }
        const timer = setTimeout(resolve, ceilingMs);
        const done = () => { clearTimeout(timer); resolve(); };
        img.addEventListener('load', done, { once: true });
        img.addEventListener('error', done, { once: true });
    }))).then(() => images.length);
}
"""

# Phase 1: computed inherited styles of the body, falling back to the
# document root, then to white.
RESOLVE_STYLES = """
() => {
    const transparent = (value) =>
        !value || value === 'transparent' || /rgba\\(\\s*0\\s*,\\s*0\\s*,\\s*0\\s*,\\s*0\\s*\\)/.test(value);
    const source = document.body || document.documentElement;
    const style = getComputedStyle(source);
    let background = style.backgroundColor;
    if (transparent(background)) {
        background = getComputedStyle(document.documentElement).backgroundColor;
    }
    if (transparent(background)) {
        background = 'rgb(255, 255, 255)';
    }
    return {
        backgroundColor: background,
        color: style.color,
        fontFamily: style.fontFamily,
        fontSize: style.fontSize,
        lineHeight: style.lineHeight,
        margin: style.margin,
        padding: style.padding,
    };
}
"""

# Phase 1: raw stylesheet text and Google Fonts links of the document.
COLLECT_RESOURCES = """
() => ({
    styles: Array.from(document.querySelectorAll('style')).map((el) => el.textContent || ''),
    fontLinks: Array.from(document.querySelectorAll('link[href]'))
        .filter((el) => /fonts\\.(googleapis|gstatic)\\.com/i.test(el.href))
        .map((el) => Array.from(el.attributes).map((a) => [a.name, a.value])),
})
"""

# Phase 2: font links -> style blocks -> deep clone of the body, in that
# order, into a host container carrying the resolved styles inline. The
# secondary browsing context is discarded afterwards.
MOUNT_HOST = """
({ frameName, hostId, width, inlineStyle, styles, fontLinks }) => {
    for (const attributes of fontLinks) {
        const link = document.createElement('link');
        for (const [name, value] of attributes) link.setAttribute(name, value);
        link.setAttribute('data-export-font', hostId);
        document.head.appendChild(link);
    }

    const host = document.createElement('div');
    host.setAttribute('data-export-host', hostId);
    host.style.cssText =
        `position:fixed;left:-9999px;top:0;width:${width}px;overflow:visible;${inlineStyle}`;

    for (const css of styles) {
        const block = document.createElement('style');
        block.textContent = css;
        host.appendChild(block);
    }

    const frame = document.querySelector(`iframe[data-export-frame="${frameName}"]`);
    const sourceBody = frame && frame.contentDocument && frame.contentDocument.body;
    if (sourceBody) {
        for (const child of Array.from(sourceBody.childNodes)) {
            if (child.nodeName === 'STYLE') continue;
            host.appendChild(document.importNode(child, true));
        }
    }
    if (frame) frame.remove();

    document.body.appendChild(host);
    return host.childElementCount;
}
"""

# Rasterization needs the host inside the page's scrollable area.
PLACE_FOR_CAPTURE = """
(hostId) => {
    const host = document.querySelector(`[data-export-host="${hostId}"]`);
    if (!host) return false;
    host.style.position = 'absolute';
    host.style.left = '0px';
    host.style.top = '0px';
    return true;
}
"""

# Cleanup: host container, injected font links, leftover frame.
CLEANUP = """
({ hostId, frameName }) => {
    let removed = 0;
    for (const el of document.querySelectorAll(
        `[data-export-host="${hostId}"], link[data-export-font="${hostId}"], iframe[data-export-frame="${frameName}"]`
    )) {
        el.remove();
        removed += 1;
    }
    return removed;
}
"""
