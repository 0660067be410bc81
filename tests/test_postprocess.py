"""
Tests for output post-processing.

This module tests:
- Code fence stripping
- Image prompt extraction from content plans
- Image injection into placeholders
"""

from explainer.ai.pipeline.contracts import ImageGenResult, ImagePrompt
from explainer.ai.pipeline.postprocess import (
    DEFAULT_IMAGE_STYLE,
    inject_images,
    parse_image_prompts,
    strip_code_fences,
)


class TestStripCodeFences:
    """Tests for strip_code_fences."""

    def test_strips_html_fence(self):
        assert strip_code_fences("```html\n<p>X</p>\n```") == "<p>X</p>"

    def test_strips_bare_fence(self):
        assert strip_code_fences("```\n<p>X</p>\n```") == "<p>X</p>"

    def test_fence_language_is_case_insensitive(self):
        assert strip_code_fences("```HTML\n<p>X</p>\n```") == "<p>X</p>"

    def test_trims_outer_whitespace(self):
        assert strip_code_fences("  \n```html\n  <p>X</p>  \n```\n ") == "<p>X</p>"

    def test_unwrapped_html_is_returned_trimmed(self):
        assert strip_code_fences("  <html></html>\n") == "<html></html>"

    def test_idempotent(self):
        once = strip_code_fences("```html\n<p>X</p>\n```")
        assert strip_code_fences(once) == once

    def test_fence_in_middle_is_left_alone(self):
        text = "Here you go:\n```html\n<p>X</p>\n```"
        assert strip_code_fences(text) == text


class TestParseImagePrompts:
    """Tests for parse_image_prompts."""

    def test_extracts_in_order(self):
        plan = "**img-1:** A volcano\ntext\n**img-2:** A lava flow"
        assert parse_image_prompts(plan) == [
            ImagePrompt(id="img-1", prompt="A volcano"),
            ImagePrompt(id="img-2", prompt="A lava flow"),
        ]

    def test_caps_at_two(self):
        plan = "\n".join(f"**img-{i}:** Picture {i}" for i in range(1, 6))
        prompts = parse_image_prompts(plan)
        assert [p.id for p in prompts] == ["img-1", "img-2"]

    def test_ids_follow_literal_numbers(self):
        plan = "**img-7:** First\n**img-3:** Second"
        assert [p.id for p in parse_image_prompts(plan)] == ["img-7", "img-3"]

    def test_skips_no_images_needed_any_case(self):
        plan = "**img-1:** NO IMAGES NEEDED for this topic\n**img-2:** A diagram of a CPU"
        prompts = parse_image_prompts(plan)
        assert prompts == [ImagePrompt(id="img-2", prompt="A diagram of a CPU")]

    def test_skipped_lines_do_not_count_towards_cap(self):
        plan = "**img-1:** No images needed\n**img-2:** A\n**img-3:** B\n**img-4:** C"
        assert [p.id for p in parse_image_prompts(plan)] == ["img-2", "img-3"]

    def test_non_conforming_plan_yields_nothing(self):
        assert parse_image_prompts("Image 1: a volcano\n*img-1* lava") == []

    def test_non_string_yields_nothing(self):
        assert parse_image_prompts(None) == []

    def test_custom_limit(self):
        plan = "**img-1:** A\n**img-2:** B\n**img-3:** C"
        assert len(parse_image_prompts(plan, limit=3)) == 3


class TestInjectImages:
    """Tests for inject_images."""

    def test_replaces_stale_src(self):
        html = '<img data-image-id="img-1" src="stale">'
        result = inject_images(html, [ImageGenResult(id="img-1", data_url="data:image/png;base64,NEW")])

        assert 'src="data:image/png;base64,NEW"' in result
        assert 'src="stale"' not in result

    def test_adds_default_style_without_max_width(self):
        html = '<img data-image-id="img-1" alt="x">'
        result = inject_images(html, [ImageGenResult(id="img-1", data_url="data:A")])

        assert result == f'<img src="data:A" data-image-id="img-1" alt="x" style="{DEFAULT_IMAGE_STYLE}" />'

    def test_keeps_existing_max_width(self):
        html = '<img data-image-id="img-1" style="max-width:300px">'
        result = inject_images(html, [ImageGenResult(id="img-1", data_url="data:A")])

        assert result.count("style=") == 1
        assert "max-width:300px" in result
        assert DEFAULT_IMAGE_STYLE not in result

    def test_merges_into_existing_style(self):
        html = '<img data-image-id="img-1" style="border:1px solid red">'
        result = inject_images(html, [ImageGenResult(id="img-1", data_url="data:A")])

        assert result.count("style=") == 1
        assert "border:1px solid red" in result
        assert "max-width:600px" in result

    def test_attribute_order_does_not_matter(self):
        html = '<img alt="x" data-image-id="img-2" />'
        result = inject_images(html, [ImageGenResult(id="img-2", data_url="data:B")])
        assert result.startswith('<img src="data:B"')

    def test_data_src_is_not_stripped(self):
        html = '<img data-image-id="img-1" data-src="keep">'
        result = inject_images(html, [ImageGenResult(id="img-1", data_url="data:A")])
        assert 'data-src="keep"' in result

    def test_unmatched_placeholder_is_unchanged(self):
        html = '<p>Intro</p><img data-image-id="img-2" src="stale">'
        result = inject_images(html, [ImageGenResult(id="img-1", data_url="data:A")])
        assert result == html

    def test_every_placeholder_for_an_id_is_filled(self):
        html = '<img data-image-id="img-1"><img data-image-id="img-1">'
        result = inject_images(html, [ImageGenResult(id="img-1", data_url="data:A")])
        assert result.count('src="data:A"') == 2

    def test_does_not_match_longer_ids(self):
        html = '<img data-image-id="img-10">'
        assert inject_images(html, [ImageGenResult(id="img-1", data_url="data:A")]) == html

    def test_single_quoted_style_keeps_inner_double_quotes(self):
        html = """<img data-image-id="img-1" style='font-family:"Inter", sans-serif; border:1px solid red'>"""
        result = inject_images(html, [ImageGenResult(id="img-1", data_url="data:A")])

        assert result == (
            f"""<img src="data:A" data-image-id="img-1" style='{DEFAULT_IMAGE_STYLE} """
            """font-family:"Inter", sans-serif; border:1px solid red' />"""
        )

    def test_prefixed_attribute_is_not_a_placeholder(self):
        html = '<img x-data-image-id="img-1">'
        assert inject_images(html, [ImageGenResult(id="img-1", data_url="data:A")]) == html
