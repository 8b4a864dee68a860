"""Classic yellow-on-black theme, as seen on printed guidebook topos."""

from phototopo.render.style import Theme

CLASSIC_THEME = Theme(
    name="classic",
    stroke="yellow",
    outline="black",
    stroke_selected="#3D80DF",
    outline_selected="white",
    label_fill="yellow",
    label_stroke="black",
    label_text="black",
    label_font_family="Arial, Helvetica, sans-serif",
    area_stroke="black",
    area_border="white",
    area_fill="white",
    area_label_color="white",
    handle_fill="yellow",
    handle_stroke="black",
    handle_selected_fill="white",
    handle_active_fill="#3D80DF",
    handle_active_stroke="white",
)
