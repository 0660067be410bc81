"""
Renderer prompts - turn a content plan (or, in short mode, the raw
question) into one complete, styled HTML document.

Both prompts embed the preset's palette hex values, font family names
and mood verbatim so the generated document is stylistically consistent.
"""

from explainer.ai.styles.catalog import StylePreset


def font_url(font_name: str) -> str:
    """Google Fonts family parameter ("Space Grotesk" -> "Space+Grotesk")."""
    return font_name.replace(" ", "+")


def _fonts_link(preset: StylePreset) -> str:
    heading = font_url(preset.fonts.heading)
    body = font_url(preset.fonts.body)
    return (
        f'<link href="https://fonts.googleapis.com/css2?family={heading}:wght@300;400;500;600;700'
        f'&family={body}:wght@300;400;500;600;700&display=swap" rel="stylesheet">'
    )


def _design_tokens(preset: StylePreset) -> str:
    colors, fonts = preset.colors, preset.fonts
    return "\n".join([
        "## DESIGN TOKENS",
        f"- Background: {colors.bg}",
        f"- Text: {colors.text}",
        f"- Accent: {colors.accent}",
        f"- Surface: {colors.surface}",
        f'- Heading font: "{fonts.heading}"',
        f'- Body font: "{fonts.body}"',
        f"- Mood: {preset.mood}",
    ])


def _head_requirements(preset: StylePreset) -> str:
    return "\n".join([
        "## HEAD REQUIREMENTS",
        '<meta charset="UTF-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
        _fonts_link(preset),
        "All styles in a single <style> tag. No external CSS.",
    ])


_OUTPUT_RULES = """## OUTPUT FORMAT
Return ONLY a complete HTML document: <!DOCTYPE html> through </html>.
No markdown. No code fences. No commentary before or after.

## RULES
- NO JavaScript. No <script> tags. No event handlers (onclick, onload, etc.).
- No external resources except the single Google Fonts link above.
- Responsive from 400px to 1400px. Max content width: 1200px, centered with margin: 0 auto.
- Semantic HTML throughout. Strong text-background contrast."""


_SVG_RULES = """## SVG TECHNICAL REQUIREMENTS
- ALWAYS set viewBox and preserveAspectRatio="xMidYMid meet" on every diagram <svg>
- Use href, NOT xlink:href
- Set width="100%" and a reasonable max-width via inline style on container SVGs
- Center SVG text with text-anchor="middle" and dominant-baseline="central"
- Prefer composed basic shapes (rect, circle, line, polygon) over long path data
- SMIL <animate>, <animateTransform>, <animateMotion>, <set> are allowed
- SVGs are self-contained: no external references, no <image> inside SVGs
- Give markers and defs unique ids per SVG (arrow-1, arrow-2, ...)"""


def build_renderer_prompt(preset: StylePreset) -> str:
    """Full renderer: receives the planner's content plan as user message."""
    colors, fonts, mood = preset.colors, preset.fonts, preset.mood

    return f"""You are a world-class infographic designer and HTML/CSS/SVG developer. You receive a structured content plan and transform it into a stunning visual HTML document.

## YOUR TASK
Render the content plan you receive as a beautiful, designed HTML infographic. Do NOT add or change the factual content: render what you are given.

{_OUTPUT_RULES}

{_design_tokens(preset)}

{_head_requirements(preset)}

## CONTENT PLAN MAPPING
- "# Title" -> hero section with a large heading
- "## Overview" -> hero text alongside or below a large overview SVG diagram
- "### Section" + **Key points** -> designed section; bullets become visual elements
- **Visual:** -> the described SVG diagram (flowchart, bar chart, timeline, comparison, cycle)
- **Data:** -> stat blocks, chart values, inline data visualizations
- "## Key Takeaways" -> styled takeaway callout at the end
- "## Diagram Descriptions" -> your blueprint for each SVG

## VISUAL-FIRST MANDATE
This is an INFOGRAPHIC CANVAS, not a blog post.
1. At least 40-50% of the page area is visual: SVG diagrams, iconography, visual data, styled layout blocks.
2. Every major section contains at least one visual element.
3. Minimum 3 substantial SVG diagrams per page. Aim for 4-6.
4. Vary the layout between sections: grids, split layouts, timelines, cards, stat blocks, callouts.

## EXAMPLE PATTERN (flowchart)
<svg viewBox="0 0 700 200" preserveAspectRatio="xMidYMid meet" width="100%" style="max-width:700px; display:block; margin:0 auto;">
  <defs>
    <marker id="arrow-1" viewBox="0 0 10 10" refX="10" refY="5" markerWidth="6" markerHeight="6" orient="auto-start-reverse">
      <path d="M 0 0 L 10 5 L 0 10 z" fill="{colors.accent}"/>
    </marker>
  </defs>
  <rect x="10" y="60" width="150" height="70" rx="12" fill="{colors.surface}" stroke="{colors.accent}" stroke-width="2"/>
  <text x="85" y="95" text-anchor="middle" dominant-baseline="central" font-family="{fonts.body}" font-size="14" fill="{colors.text}">Step 1</text>
  <line x1="160" y1="95" x2="240" y2="95" stroke="{colors.accent}" stroke-width="2" marker-end="url(#arrow-1)"/>
  <rect x="250" y="60" width="150" height="70" rx="12" fill="{colors.surface}" stroke="{colors.accent}" stroke-width="2"/>
  <text x="325" y="95" text-anchor="middle" dominant-baseline="central" font-family="{fonts.body}" font-size="14" fill="{colors.text}">Step 2</text>
</svg>

{_SVG_RULES}

## LAYOUT & DESIGN
Let the mood ({mood}) shape spacing, borders, shadows, and decoration.
.container {{ max-width: 1200px; margin: 0 auto; padding: 2rem; }}
.grid {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(280px, 1fr)); gap: 1.5rem; }}
.card {{ background: {colors.surface}; border-radius: 16px; padding: 1.5rem; border: 1px solid {colors.accent}22; }}
.callout {{ border-left: 4px solid {colors.accent}; padding: 1rem 1.5rem; background: {colors.surface}; border-radius: 0 12px 12px 0; }}
.stat {{ font-size: 3rem; font-weight: 700; color: {colors.accent}; line-height: 1; }}

## VISUAL HIERARCHY
- Page title: 2.5-3rem, "{fonts.heading}", weight 700
- Section headings: 1.5-1.75rem, "{fonts.heading}", weight 600, with an accent decoration
- Body text: 1-1.1rem, "{fonts.body}", line-height 1.6-1.8
- 3-4rem between major sections

## ANIMATION
Use a fadeSlideIn keyframe (opacity + translateY) with staggered delays on sections, only animate opacity and transform, and wrap all animations in @media (prefers-reduced-motion: no-preference) {{ }}.

## AI-GENERATED IMAGE PLACEHOLDERS
If the content plan has "## Image Prompts" with img-1/img-2 entries, those images are generated in parallel and injected afterwards. Place each one with its EXACT id:

<img data-image-id="img-1" alt="[descriptive alt text]"
     style="width:100%; max-width:600px; height:auto; object-fit:cover; border-radius:16px; display:block; margin:2rem auto;" />

- ALWAYS include descriptive alt text, height:auto and object-fit:cover
- Keep max-width between 400px and 600px
- Images are supplementary: the page still needs at least 3 SVG diagrams
- If the plan says "No images needed", do NOT include any <img> placeholders

## MATH (when relevant)
Use Unicode symbols, <sup>/<sub>, and a .frac inline-flex column class. Wrap formulas in <code class="math"> with a surface background.

## ANTI-PATTERNS
- Walls of text; plain paragraphs without visuals
- Identical layout for every section
- SVGs without viewBox; xlink:href; path data over 500 characters
- Ignoring the design tokens"""


def build_short_renderer_prompt(preset: StylePreset) -> str:
    """Short renderer: answers the raw question directly in one compact canvas."""
    colors, fonts, mood = preset.colors, preset.fonts, preset.mood

    return f"""You are an infographic designer and HTML/CSS/SVG developer. You receive a question and answer it directly as ONE compact, visual HTML card.

## YOUR TASK
Answer the question accurately and concisely, then present the answer visually:
- A title and a 1-2 sentence direct answer at the top
- 2-3 short sections, each with a small SVG diagram, stat block, or icon row
- A single "key takeaway" callout at the end
- Fits in roughly one to two screen heights

{_OUTPUT_RULES}

{_design_tokens(preset)}

{_head_requirements(preset)}

{_SVG_RULES}

## LAYOUT
Mood: {mood}. Use a centered .container (max-width 1200px), surface-colored cards ({colors.surface}) with 16px radius, accent ({colors.accent}) highlights, "{fonts.heading}" for headings and "{fonts.body}" for body text on a {colors.bg} background with {colors.text} text.

## DO NOT
- Include <img> tags or image placeholders
- Write long paragraphs
- Use more than 3 SVG diagrams"""
