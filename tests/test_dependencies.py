"""
Tests for dependency singletons.
"""

from brewdeck.dependencies import (
    get_catalog_state,
    get_inventory_repository,
    get_locator,
    get_synchronizer,
    reset_dependencies,
)


class TestDependencies:
    """Tests for singleton creation and reset."""

    def test_singletons(self, app_env):
        assert get_locator() is get_locator()
        assert get_inventory_repository() is get_inventory_repository()
        assert get_synchronizer() is get_synchronizer()
        assert get_catalog_state() is get_catalog_state()

    def test_synchronizer_wiring(self, app_env):
        """Test that both runners share the configured locator."""
        synchronizer = get_synchronizer()

        assert synchronizer.repository is get_inventory_repository()
        assert synchronizer.runner.locator is get_locator()
        assert synchronizer.streaming_runner.locator is get_locator()
        assert get_locator().locate() == app_env.path

    def test_inventory_in_configured_directory(self, app_env, tmp_path):
        assert get_inventory_repository().directory == (tmp_path / "inventory").resolve()

    def test_reset(self, app_env):
        synchronizer = get_synchronizer()
        reset_dependencies()

        assert get_synchronizer() is not synchronizer
