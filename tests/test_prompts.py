"""
Tests for the role prompts.
"""

from explainer.ai.detail_levels import DetailLevel
from explainer.ai.prompts import (
    PREVIEW_MAX_TOKENS,
    PREVIEW_PROMPT,
    PREVIEW_TEMPERATURE,
    build_planner_prompt,
    build_renderer_prompt,
    build_short_renderer_prompt,
    font_url,
)
from explainer.ai.styles import PRESETS


class TestPlannerPrompt:
    """Tests for build_planner_prompt."""

    def test_depth_follows_detail_level(self):
        assert "3-5 distinct sections" in build_planner_prompt(DetailLevel.BALANCED)
        assert "5-7 distinct sections" in build_planner_prompt(DetailLevel.DETAILED)
        assert "Aim for 6-8 diagrams" in build_planner_prompt(DetailLevel.DETAILED)

    def test_accepts_level_string(self):
        assert build_planner_prompt("balanced") == build_planner_prompt(DetailLevel.BALANCED)

    def test_describes_image_prompt_format(self):
        prompt = build_planner_prompt()
        assert "**img-1:**" in prompt
        assert "**img-2:**" in prompt
        assert "No images needed." in prompt

    def test_no_unfilled_placeholders(self):
        for level in DetailLevel:
            prompt = build_planner_prompt(level)
            assert "{sections}" not in prompt
            assert "{diagrams}" not in prompt


class TestRendererPrompts:
    """Tests for the full and short renderer prompts."""

    def test_embeds_design_tokens(self):
        preset = PRESETS[0]
        prompt = build_renderer_prompt(preset)

        for value in (preset.colors.bg, preset.colors.text, preset.colors.accent, preset.colors.surface):
            assert value in prompt
        assert f'"{preset.fonts.heading}"' in prompt
        assert preset.mood in prompt

    def test_fonts_link_uses_plus_separated_names(self):
        prompt = build_renderer_prompt(PRESETS[0])
        assert "family=Space+Grotesk:wght@300;400;500;600;700" in prompt
        assert "family=Inter:wght@" in prompt

    def test_full_prompt_describes_image_placeholders(self):
        assert 'data-image-id="img-1"' in build_renderer_prompt(PRESETS[1])

    def test_short_prompt_has_no_image_placeholders(self):
        prompt = build_short_renderer_prompt(PRESETS[1])

        assert "data-image-id" not in prompt
        assert "Include <img> tags" in prompt
        assert PRESETS[1].colors.accent in prompt

    def test_prompts_are_deterministic(self):
        for preset in PRESETS:
            assert build_renderer_prompt(preset) == build_renderer_prompt(preset)
            assert build_short_renderer_prompt(preset) == build_short_renderer_prompt(preset)

    def test_font_url(self):
        assert font_url("Cormorant Garamond") == "Cormorant+Garamond"
        assert font_url("Inter") == "Inter"


class TestPreviewPrompt:
    def test_constants(self):
        assert "2-3 sentences" in PREVIEW_PROMPT
        assert PREVIEW_TEMPERATURE == 0.3
        assert PREVIEW_MAX_TOKENS == 200
