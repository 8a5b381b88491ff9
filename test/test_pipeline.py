"""Tests for the pipeline, its context and the table store."""

import numpy as np
import pandas as pd
import pytest

from conftest import make_profiles
from tsrep import (
    ClusterConfig,
    PipelineContext,
    RepresentativePeriodPipeline,
    TableStore,
)
from tsrep.exceptions import DataError
from tsrep.io import read_table_csv, table_name_from_file


class TestPipeline:
    def test_run_registers_tables(self, profiles):
        context = PipelineContext(TableStore({"profiles": profiles}))

        result = RepresentativePeriodPipeline(n_rep_periods=5).run(context)

        assert context.result is result
        for name in RepresentativePeriodPipeline.OUTPUT_TABLES:
            assert name in context.store
        assert "profiles_rep_periods_availability" in context.store
        assert "profiles_rep_periods_demand" in context.store
        assert len(context.store["rep_periods_data"]) == 5
        assert len(context.store["rep_periods_mapping"]) == 30
        assert sorted(context.profile_names) == sorted(profiles.asset.unique())

    def test_input_table_is_unchanged(self, profiles):
        before = profiles.copy()
        context = PipelineContext(TableStore({"all_profiles": profiles}))

        RepresentativePeriodPipeline(n_rep_periods=3).run(
            context, profiles_table="all_profiles"
        )

        pd.testing.assert_frame_equal(context.store["all_profiles"], before)

    def test_stages(self, profiles):
        pipeline = RepresentativePeriodPipeline(
            n_rep_periods=4, cluster=ClusterConfig(period_duration=48)
        )

        split, names = pipeline.segment(profiles)
        assert split["period"].max() == 15
        assert names["demand-Midgard_E_demand"].entity_name == "Midgard_E_demand"

        result = pipeline.cluster(split)
        assert result.period_duration == 48

        counts = pipeline.weights(result)
        assert counts.sum() == 15

        tables = pipeline.export(result, names)
        assert tables["rep_periods_data"]["num_timesteps"].tolist() == [48] * 4

    def test_invalid_names_fail_before_clustering(self):
        profiles = make_profiles(names=["demand-Midgard", "Asgard_Solar"], n_periods=2)
        context = PipelineContext(TableStore({"profiles": profiles}))

        with pytest.raises(DataError, match="'Asgard_Solar'"):
            RepresentativePeriodPipeline(n_rep_periods=1).run(context)
        assert context.result is None
        assert "rep_periods_data" not in context.store

    def test_same_result_for_every_run(self, profiles):
        pipeline = RepresentativePeriodPipeline(n_rep_periods=6)
        first = PipelineContext(TableStore({"profiles": profiles}))
        second = PipelineContext(TableStore({"profiles": profiles}))

        pipeline.run(first)
        pipeline.run(second)

        assert first.run_id != second.run_id
        for name in RepresentativePeriodPipeline.OUTPUT_TABLES:
            pd.testing.assert_frame_equal(first.store[name], second.store[name])

    def test_missing_table(self):
        context = PipelineContext()

        with pytest.raises(KeyError, match="Table 'profiles' not found"):
            RepresentativePeriodPipeline(n_rep_periods=1).run(context)


class TestTableStore:
    def test_register_and_get(self):
        store = TableStore()
        frame = pd.DataFrame({"a": [1, 2]})
        store.register("assets_data", frame)

        assert "assets_data" in store
        assert store["assets_data"] is frame
        assert store.names() == ["assets_data"]
        assert len(store) == 1
        assert list(store) == ["assets_data"]

        store.drop("assets_data")
        assert "assets_data" not in store

    def test_register_wrong_type(self):
        with pytest.raises(TypeError, match="must be a pandas DataFrame"):
            TableStore().register("profiles", [1, 2, 3])

    def test_table_name_from_file(self):
        assert table_name_from_file("data/all-profiles.csv") == "all_profiles"

    def test_read_csv_folder_with_units_line(self, tmp_path):
        (tmp_path / "all-profiles.csv").write_text(
            ",,p.u.\nasset,time_step,value\ndemand-Midgard,1,0.5\ndemand-Midgard,2,0.25\n"
        )
        (tmp_path / "assets-data.csv").write_text("name,type\nMidgard,consumer\n")
        (tmp_path / "notes.txt").write_text("not a table")

        store = TableStore.from_csv_folder(tmp_path)

        assert store.names() == ["all_profiles", "assets_data"]
        assert list(store["all_profiles"].columns) == ["asset", "time_step", "value"]
        np.testing.assert_array_equal(store["all_profiles"]["value"], [0.5, 0.25])
        assert store["assets_data"]["type"].tolist() == ["consumer"]

    def test_blank_header_cell_is_not_a_units_line(self, tmp_path):
        path = tmp_path / "rep-periods-mapping.csv"
        path.write_text(",period,weight\n0,1,1.0\n1,2,1.0\n")

        table = read_table_csv(path)

        assert list(table.columns) == ["Unnamed: 0", "period", "weight"]
        assert table["period"].tolist() == [1, 2]

    def test_explicit_header_row(self, tmp_path):
        path = tmp_path / "profiles.csv"
        path.write_text("unit,,\nasset,time_step,value\ndemand-Midgard,1,0.5\n")

        table = read_table_csv(path, header_row=1)

        assert list(table.columns) == ["asset", "time_step", "value"]

    def test_missing_folder(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TableStore.from_csv_folder(tmp_path / "missing")

    def test_write_and_read_back(self, tmp_path, two_day_profiles):
        context = PipelineContext(TableStore({"profiles": two_day_profiles}))
        RepresentativePeriodPipeline(n_rep_periods=1).run(context)

        context.store.to_csv_folder(tmp_path, names=RepresentativePeriodPipeline.OUTPUT_TABLES)
        read_back = TableStore.from_csv_folder(tmp_path)

        assert read_back.names() == sorted(RepresentativePeriodPipeline.OUTPUT_TABLES)
        pd.testing.assert_frame_equal(
            read_back["rep_periods_mapping"],
            context.store["rep_periods_mapping"],
            check_dtype=False,
        )
