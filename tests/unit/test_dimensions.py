"""Tests for table footprint estimation."""

from schemalayout.layout.dimensions import (
    DEFAULT_DIMENSIONS,
    HEADER_HEIGHT,
    MIN_HEIGHT,
    MIN_WIDTH,
    PADDING,
    ROW_HEIGHT,
    TableDimensions,
    estimate_dimensions,
)


class TestEstimateDimensions:

    def test_unknown_entity_uses_default(self):
        dims = estimate_dimensions(None, [])
        assert (dims.width, dims.height) == DEFAULT_DIMENSIONS

    def test_small_table_clamped_to_minimum(self):
        dims = estimate_dimensions("Blog", [("Id", "int"), ("Title", "string")])
        assert dims.width == MIN_WIDTH
        assert dims.height == MIN_HEIGHT

    def test_width_follows_longest_texts(self):
        dims = estimate_dimensions(
            "Address",
            [("CustomerShippingAddressLine", "string"), ("Id", "int")],
        )
        # 27 name chars, 6 type chars
        assert dims.width == 27 * 20 + 6 * 18 + PADDING * 8

    def test_height_grows_with_fields(self):
        fields = [(f"Field{i}", "int") for i in range(10)]
        dims = estimate_dimensions("Wide", fields)
        assert dims.height == HEADER_HEIGHT + 10 * ROW_HEIGHT + PADDING

    def test_more_fields_never_shrink(self):
        few = estimate_dimensions("T", [("A", "int")] * 4)
        many = estimate_dimensions("T", [("A", "int")] * 8)
        assert many.height > few.height
        assert many.width == few.width

    def test_half_extents(self):
        dims = TableDimensions(width=700.0, height=300.0)
        assert dims.half_width == 350.0
        assert dims.half_height == 150.0
