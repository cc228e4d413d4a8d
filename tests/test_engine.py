"""Tests for pixelcraft.engine — the command surface, strokes, history and text placement."""

import pytest
from pixelcraft.core.codec import to_document
from pixelcraft.core.env import Settings
from pixelcraft.core.errors import InvalidDimension, MalformedDocument
from pixelcraft.core.grid import empty_grid
from pixelcraft.core.storage import LocalStore
from pixelcraft.core.types import EMPTY, GridSize, PatternState, StrokeState, Tool
from pixelcraft.engine import PatternEngine


@pytest.fixture
def engine():
    return PatternEngine(3, 3, palette=['#000000', '#ffffff'])


class TestScenarios:
    def test_paint_undo_redo_3x3(self, engine):
        engine.set_cell(1, 1, '#ffffff')
        assert engine.undo() is True
        assert engine.grid == empty_grid(3, 3)
        assert engine.redo() is True
        expected = empty_grid(3, 3)
        expected[1][1] = '#ffffff'
        assert engine.grid == expected

    def test_resize_2x2_to_4x4(self):
        engine = PatternEngine(2, 2)
        engine.set_cell(0, 0, '#ff0000')
        engine.set_cell(0, 1, '#00ff00')
        engine.set_cell(1, 0, '#0000ff')
        engine.set_cell(1, 1, '#000000')
        engine.resize(4, 4)
        grid = engine.grid
        assert [row[:2] for row in grid[:2]] == [['#ff0000', '#00ff00'], ['#0000ff', '#000000']]
        assert all(cell == EMPTY for row in grid[2:] for cell in row)
        assert all(cell == EMPTY for row in grid for cell in row[2:])

    def test_undo_n_redo_n_reproduces_nth_commit(self):
        engine = PatternEngine(5, 5)
        colours = ['#000000', '#ffffff', '#ff0000', '#3b82f6']
        for i, colour in enumerate(colours):
            engine.set_cell(i, i, colour)
        final = engine.grid
        for _ in colours:
            engine.undo()
        assert engine.grid == empty_grid(5, 5)
        for _ in colours:
            engine.redo()
        assert engine.grid == final


class TestHistory:
    def test_fresh_engine_cannot_undo_or_redo(self, engine):
        assert not engine.can_undo
        assert not engine.can_redo
        assert engine.undo() is False
        assert engine.redo() is False

    def test_unchanged_cell_does_not_commit(self, engine):
        engine.set_cell(0, 0, '#000000')
        engine.set_cell(0, 0, '#000000')
        assert len(engine.history) == 2

    def test_out_of_bounds_paint_does_not_commit(self, engine):
        assert engine.set_cell(5, 5, '#000000') is False
        assert len(engine.history) == 1

    def test_new_commit_discards_redo(self, engine):
        engine.set_cell(0, 0, '#000000')
        engine.set_cell(0, 1, '#000000')
        engine.undo()
        assert engine.can_redo
        engine.set_cell(2, 2, '#ffffff')
        assert not engine.can_redo
        assert engine.cell(0, 1) == EMPTY

    def test_undo_resize_restores_dimensions(self, engine):
        engine.resize(6, 4)
        engine.undo()
        assert engine.grid_size == GridSize(3, 3)
        engine.redo()
        assert engine.grid_size == GridSize(6, 4)

    def test_clear_commits(self, engine):
        engine.set_cell(0, 0, '#000000')
        engine.clear()
        assert engine.grid == empty_grid(3, 3)
        engine.undo()
        assert engine.cell(0, 0) == '#000000'

    def test_undo_returns_a_copy_not_history_storage(self, engine):
        engine.set_cell(0, 0, '#000000')
        engine.undo()
        engine.store.set_cell(1, 1, '#ffffff')  # mutate without committing
        engine.redo()
        engine.undo()
        assert engine.cell(1, 1) == EMPTY

    def test_invalid_resize_changes_nothing(self, engine):
        engine.begin_stroke()
        engine.paint(0, 0)
        with pytest.raises(InvalidDimension):
            engine.resize(0, 3)
        assert engine.stroke_state is StrokeState.STROKING
        assert len(engine.history) == 1


class TestStrokes:
    def test_stroke_is_one_commit(self):
        engine = PatternEngine(10, 10)
        engine.begin_stroke()
        colours = ['#000000', '#ff0000', '#3b82f6', '#10b981', '#f59e0b']
        for k, colour in enumerate(colours):
            engine.set_current_colour(colour)
            engine.paint(k, k)
        assert len(engine.history) == 1
        assert engine.end_stroke() is True
        assert len(engine.history) == 2

        engine.undo()
        assert engine.grid == empty_grid(10, 10)

    def test_state_machine(self, engine):
        assert engine.stroke_state is StrokeState.IDLE
        engine.begin_stroke()
        assert engine.stroke_state is StrokeState.STROKING
        engine.begin_stroke()
        assert engine.stroke_state is StrokeState.STROKING
        engine.end_stroke()
        assert engine.stroke_state is StrokeState.IDLE

    def test_noop_stroke_does_not_commit(self, engine):
        engine.set_cell(0, 0, '#000000')
        engine.begin_stroke()
        engine.paint(0, 0)  # already #000000
        assert engine.end_stroke() is False
        assert len(engine.history) == 2

    def test_stroke_that_restores_itself_does_not_commit(self, engine):
        engine.begin_stroke()
        engine.paint(0, 0)
        engine.erase(0, 0)
        assert engine.end_stroke() is False
        assert len(engine.history) == 1

    def test_stroke_off_the_edge(self, engine):
        engine.begin_stroke()
        for col in range(-2, 6):
            engine.paint(1, col)
        engine.end_stroke()
        assert engine.grid[1] == ['#000000'] * 3
        assert len(engine.history) == 2

    def test_end_stroke_while_idle_is_noop(self, engine):
        assert engine.end_stroke() is False

    def test_import_closes_open_stroke(self, engine):
        engine.begin_stroke()
        engine.paint(0, 0)
        doc = to_document(PatternState(empty_grid(2, 2), GridSize(2, 2), ['#ff0000']))
        engine.import_document(doc)
        assert engine.stroke_state is StrokeState.IDLE
        assert engine.grid_size == GridSize(2, 2)
        assert len(engine.history) == 1

    def test_undo_during_stroke_reverts_the_partial_stroke(self, engine):
        engine.begin_stroke()
        engine.paint(0, 0)
        engine.paint(0, 1)
        assert engine.undo() is True
        assert engine.stroke_state is StrokeState.IDLE
        assert engine.grid == empty_grid(3, 3)
        engine.redo()
        assert engine.grid[0][:2] == ['#000000', '#000000']

    def test_resize_closes_open_stroke_first(self, engine):
        engine.begin_stroke()
        engine.paint(2, 2)
        engine.resize(2, 2)
        # stroke commit, then resize commit
        assert len(engine.history) == 3
        engine.undo()
        assert engine.cell(2, 2) == '#000000'


class TestTools:
    def test_apply_tool_brush(self, engine):
        engine.apply_tool(0, 0)
        assert engine.cell(0, 0) == '#000000'

    def test_eyedropper_then_paint(self, engine):
        engine.set_cell(2, 2, '#ffffff')
        engine.set_tool(Tool.EYEDROPPER)
        engine.apply_tool(2, 2)
        assert engine.current_colour == '#ffffff'
        assert engine.tool is Tool.BRUSH
        engine.apply_tool(0, 0)
        assert engine.cell(0, 0) == '#ffffff'

    def test_pan_does_not_paint(self, engine):
        engine.set_tool('pan')
        engine.apply_tool(0, 0)
        assert engine.cell(0, 0) == EMPTY

    def test_remove_palette_colour(self, engine):
        assert engine.remove_palette_colour('#000000') is True
        assert engine.current_colour == '#ffffff'
        assert engine.remove_palette_colour('#ffffff') is False
        assert engine.palette == ['#ffffff']


class TestTextPlacement:
    @pytest.fixture
    def big(self):
        return PatternEngine(60, 40)

    def test_begin_text_switches_tool(self, big):
        big.set_current_colour('#ff0000')
        placement = big.begin_text(2, 3)
        assert big.tool is Tool.TEXT
        assert placement.colour == '#ff0000'
        assert (placement.row, placement.col) == (2, 3)

    def test_cancel_discards(self, big):
        big.begin_text(1, 1)
        big.update_text(content='HI', scale=3)
        big.cancel_text()
        assert big.text is None
        assert big.tool is Tool.BRUSH
        assert big.grid == empty_grid(60, 40)
        assert len(big.history) == 1

    def test_confirm_paints_once(self, big):
        big.set_current_colour('#3b82f6')
        big.begin_text(2, 4)
        big.update_text(content='H', scale=3)
        assert big.grid == empty_grid(60, 40)  # still staged
        assert big.confirm_text() is True
        painted = [(r, c) for r, row in enumerate(big.grid) for c, v in enumerate(row) if v]
        assert painted
        assert {big.cell(r, c) for r, c in painted} == {'#3b82f6'}
        assert min(r for r, _ in painted) == 2
        assert min(c for _, c in painted) == 4
        assert len(big.history) == 2
        assert big.tool is Tool.BRUSH
        assert big.text is None

        big.undo()
        assert big.grid == empty_grid(60, 40)

    def test_right_alignment_ends_at_anchor(self, big):
        big.begin_text(0, 50)
        big.update_text(content='H', scale=3, alignment='right')
        big.confirm_text()
        cols = [c for row in big.grid for c, v in enumerate(row) if v]
        assert max(cols) == 50

    def test_text_is_clipped_at_the_edge(self, big):
        big.begin_text(35, 58)
        big.update_text(content='HHHH', scale=3)
        assert big.confirm_text() is True
        assert big.grid_size == GridSize(60, 40)

    def test_empty_content_confirms_nothing(self, big):
        big.begin_text()
        assert big.confirm_text() is False
        assert big.text is not None
        assert len(big.history) == 1

    def test_blank_content_confirms_nothing(self, big):
        big.begin_text(2, 2)
        big.update_text(content='   ', scale=2)
        assert big.confirm_text() is False
        assert big.grid == empty_grid(60, 40)
        assert len(big.history) == 1
        assert not big.can_undo
        assert big.text is not None

    def test_text_entirely_off_grid_confirms_nothing(self, big):
        big.begin_text(500, 500)
        big.update_text(content='H', scale=3)
        assert big.confirm_text() is False
        assert len(big.history) == 1

    def test_scale_is_clamped(self, big):
        big.begin_text()
        assert big.update_text(scale=9).scale == 3
        assert big.update_text(scale=0).scale == 1

    def test_bad_alignment(self, big):
        big.begin_text()
        with pytest.raises(ValueError):
            big.update_text(alignment='justify')

    def test_update_without_placement(self, big):
        assert big.update_text(content='x') is None

    def test_switching_tool_drops_placement(self, big):
        big.set_tool(Tool.TEXT)
        assert big.text is not None
        big.set_tool(Tool.BRUSH)
        assert big.text is None


class TestImportExport:
    def test_document_round_trip(self, engine):
        engine.set_cell(0, 2, '#ffffff')
        engine.add_palette_colour('#123456')
        doc = engine.export_document()

        other = PatternEngine()
        other.import_document(doc)
        assert other.grid == engine.grid
        assert other.grid_size == engine.grid_size
        assert other.palette == engine.palette

    def test_import_resets_history(self, engine):
        engine.set_cell(0, 0, '#000000')
        engine.import_document(engine.export_document())
        assert len(engine.history) == 1
        assert not engine.can_undo

    def test_malformed_import_leaves_state(self, engine):
        engine.set_cell(0, 0, '#000000')
        before = engine.state()
        with pytest.raises(MalformedDocument):
            engine.import_document({'grid': [], 'palette': ['#000000']})
        assert engine.state() == before
        assert len(engine.history) == 2

    def test_save_document(self, engine, tmp_path):
        path = engine.save_document(tmp_path)
        assert path.name.startswith('pixel_craft_')
        other = PatternEngine()
        other.open_document(path)
        assert other.grid == engine.grid

    def test_export_png(self, engine, tmp_path):
        path = engine.export_png(tmp_path, show_grid_lines=True)
        assert path.name.endswith('_with_grid.png')
        assert path.exists()

    def test_render_uses_cell_size(self):
        engine = PatternEngine(4, 2, cell_size=5)
        assert engine.render().size == (20, 10)
        assert engine.render(cell_size=1).size == (4, 2)


class TestStorageSlot:
    def test_save_and_load(self, tmp_path):
        engine = PatternEngine(3, 3, local_store=LocalStore(tmp_path))
        engine.set_cell(1, 1, '#ff0000')
        assert engine.save_to_store() == (True, None)

        fresh = PatternEngine(local_store=LocalStore(tmp_path))
        assert fresh.load_from_store() is True
        assert fresh.grid == engine.grid
        assert len(fresh.history) == 1

    def test_missing_slot_keeps_defaults(self, tmp_path):
        engine = PatternEngine(local_store=LocalStore(tmp_path))
        assert engine.load_from_store() is False
        assert engine.grid_size == GridSize(20, 20)

    def test_malformed_slot_keeps_defaults(self, tmp_path):
        store = LocalStore(tmp_path)
        store.path.write_text('{"grid": "nope"}')
        engine = PatternEngine(local_store=store)
        assert engine.load_from_store() is False
        assert engine.grid == empty_grid(20, 20)

    def test_save_failure_is_reported(self, tmp_path):
        blocker = tmp_path / 'not-a-dir'
        blocker.write_text('x')
        engine = PatternEngine(3, 3, local_store=LocalStore(blocker))
        engine.set_cell(0, 0, '#000000')
        ok, error = engine.save_to_store()
        assert ok is False
        assert error
        assert engine.cell(0, 0) == '#000000'

    def test_no_store_configured(self):
        engine = PatternEngine()
        assert engine.save_to_store()[0] is False
        assert engine.load_from_store() is False

    def test_from_settings(self, tmp_path):
        engine = PatternEngine.from_settings(Settings(store_dir=tmp_path, grid_width=8, grid_height=6, cell_size=4))
        assert engine.grid_size == GridSize(8, 6)
        assert engine.local_store is not None
        assert engine.local_store.directory == tmp_path
        assert engine.render().size == (32, 24)


class TestIndependentInstances:
    def test_engines_do_not_share_state(self):
        a = PatternEngine(3, 3)
        b = PatternEngine(3, 3)
        a.paint(0, 0)
        assert b.cell(0, 0) == EMPTY
        assert len(b.history) == 1
