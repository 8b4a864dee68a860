"""Monochrome theme for print and photocopies."""

from phototopo.render.style import Theme

MONO_THEME = Theme(
    name="mono",
    stroke="white",
    outline="black",
    stroke_selected="#777777",
    outline_selected="white",
    label_fill="white",
    label_stroke="black",
    label_text="black",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    area_stroke="black",
    area_border="white",
    area_fill="white",
    area_label_color="black",
    handle_fill="white",
    handle_stroke="black",
    handle_selected_fill="#cccccc",
    handle_active_fill="black",
    handle_active_stroke="white",
    hidden_dasharray="2,4",
)
