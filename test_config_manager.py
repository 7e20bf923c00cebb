import json
import os
import tempfile
import unittest

import config_manager


class TestConfigManager(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = self._tmp.name

    def test_project_data_path(self):
        self.assertEqual(
            config_manager.get_project_data_path(self.root, "/work/my-repo/"),
            os.path.join(self.root, "my-repo"),
        )
        self.assertEqual(
            config_manager.get_project_data_path(self.root, "https://host/org/app.git"),
            os.path.join(self.root, "app"),
        )

    def test_save_and_load_defaults(self):
        path = config_manager.save_project_defaults(
            self.root,
            "/work/my-repo",
            "mine",
            {"main_branch": "trunk", "group_by": "week", "unknown": 1},
        )
        self.assertEqual(
            config_manager.load_project_config(path),
            {"main_branch": "trunk", "group_by": "week"},
        )
        self.assertEqual(
            config_manager.get_path_from_alias(self.root, "mine"), "/work/my-repo"
        )

    def test_broken_files_fall_back_to_empty(self):
        project = os.path.join(self.root, "p")
        os.makedirs(project)
        with open(os.path.join(project, config_manager.CONFIG_JSON_FILE), "w") as f:
            f.write("{not json")
        self.assertEqual(config_manager.load_project_config(project), {})

        with open(os.path.join(project, config_manager.CONFIG_JSON_FILE), "w") as f:
            json.dump(["a", "list"], f)
        self.assertEqual(config_manager.load_project_config(project), {})

        with open(os.path.join(self.root, config_manager.PROJECTS_JSON_FILE), "w") as f:
            f.write("")
        self.assertEqual(config_manager.load_project_aliases(self.root), {})


if __name__ == "__main__":
    unittest.main()
