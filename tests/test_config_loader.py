import pytest

from config.config_loader import load_search_config
from config.search_config import SearchSettings, FacetFieldSettings


@pytest.fixture
def write_config(tmp_path):
    def _write(content: str):
        path = tmp_path / "search_config.yml"
        path.write_text(content)
        return str(path)
    return _write


class TestLoadSearchConfig:

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_search_config(str(tmp_path / "nope.yml"))
        assert settings == SearchSettings()

    def test_values_are_loaded(self, write_config):
        path = write_config("""
search:
  num_of_results: 10
  base_filter: "-state:deleted"
  facet_fields:
    - solr_field: subject_ms
      label: Subject
    - solr_field: date_dt
      date_range: true
      range_facet_slider_enabled: true
  result_fields: [dc.title, dc.creator]
""")
        settings = load_search_config(path)
        assert settings.num_of_results == 10
        assert settings.base_filters == ["-state:deleted"]
        assert [f.solr_field for f in settings.facet_fields] == ["subject_ms", "date_dt"]
        assert settings.result_fields == ["dc.title", "dc.creator"]

    def test_invalid_value_falls_back_to_default(self, write_config):
        path = write_config("""
search:
  num_of_results: lots
  base_query: "dc.title:*"
""")
        settings = load_search_config(path)
        assert settings.num_of_results == 20
        assert settings.base_query == "dc.title:*"

    def test_env_variables_are_expanded(self, write_config, monkeypatch):
        monkeypatch.setenv("SITE_NAMESPACES", "demo,test")
        path = write_config("""
search:
  namespace_restriction: ${SITE_NAMESPACES}
""")
        assert load_search_config(path).namespaces == ["demo", "test"]

    def test_missing_env_variable(self, write_config, monkeypatch):
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        path = write_config("""
search:
  base_query: ${NOT_SET_ANYWHERE}
""")
        with pytest.raises(ValueError):
            load_search_config(path)

    def test_top_level_must_be_mapping(self, write_config):
        with pytest.raises(ValueError):
            load_search_config(write_config("- a\n- b\n"))

    def test_empty_file(self, write_config):
        assert load_search_config(write_config("")) == SearchSettings()


class TestSearchSettings:

    def test_facet_partition(self):
        settings = SearchSettings(facet_fields=[
            FacetFieldSettings(solr_field="a_ms"),
            FacetFieldSettings(solr_field="date_dt", date_range=True),
            # Same field configured twice: the date facet wins
            FacetFieldSettings(solr_field="date_dt"),
        ])
        standard, date_range = settings.facet_configs()
        assert [f.field for f in standard] == ["a_ms"]
        assert [f.field for f in date_range] == ["date_dt"]
        assert date_range[0].is_date_range

    def test_highlight_config(self):
        assert SearchSettings().highlight_config() is None
        highlight = SearchSettings(snippet_fields=["dc.title"]).highlight_config()
        assert highlight.fields == ["dc.title"]
        assert highlight.fragment_size == 400
