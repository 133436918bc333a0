"""Tests for representative file sampling."""

import random

import pytest

from conftest import write_files

from eslint_config_snapshot.sampling import (
    collect_candidate_files,
    create_token_priority_map,
    distributed_indices,
    normalize_token,
    pick_uniformly,
    primary_token,
    sample_workspace_files,
)
from eslint_config_snapshot.sampling.tokens import tokenize_path_part


def _files(count, prefix="src/file"):
    return [f"{prefix}{index:03d}.ts" for index in range(count)]


class TestSampleWorkspaceFiles:
    def test_identity_below_cap(self):
        """Below the cap every candidate is returned, sorted."""
        candidates = ["src/b.ts", "src/a.ts", "README.md"]
        assert sample_workspace_files(candidates, 10) == ["README.md", "src/a.ts", "src/b.ts"]

    def test_identity_at_cap(self):
        """Exactly at the cap nothing is dropped."""
        candidates = _files(5)
        assert sample_workspace_files(candidates, 5) == candidates

    def test_empty(self):
        """No candidates give an empty sample."""
        assert sample_workspace_files([], 10) == []

    @pytest.mark.parametrize("count,cap", [(11, 10), (50, 10), (200, 7), (30, 1), (4, 3)])
    def test_cap_respected(self, count, cap):
        """Samples hold exactly cap distinct candidates in sorted order."""
        candidates = _files(count)
        sample = sample_workspace_files(candidates, cap)
        assert len(sample) == cap
        assert len(set(sample)) == cap
        assert set(sample) <= set(candidates)
        assert sample == sorted(sample)

    def test_deterministic_regardless_of_input_order(self):
        """Shuffling the candidates does not change the sample."""
        candidates = _files(40) + ["src/routes/user.ts", "test/setup.ts", "src/app.controller.ts"]
        shuffled = list(candidates)
        random.Random(7).shuffle(shuffled)
        assert sample_workspace_files(candidates, 8) == sample_workspace_files(shuffled, 8)

    def test_token_diversity_picks_one_file_per_role(self):
        """One representative is taken per primary token before filling."""
        candidates = [
            "src/a.controller.ts",
            "src/b.controller.ts",
            "src/c.controller.ts",
            "src/routes/x.ts",
            "src/routes/y.ts",
            "src/utils/z.ts",
            "src/w.test.ts",
        ] + [f"src/f{index}.ts" for index in range(1, 11)]
        assert sample_workspace_files(candidates, 4) == [
            "src/a.controller.ts",
            "src/routes/x.ts",
            "src/utils/z.ts",
            "src/w.test.ts",
        ]

    def test_code_files_preferred(self):
        """Lintable source files win over other candidates."""
        candidates = [f"docs/page{index}.md" for index in range(20)] + ["src/alpha.ts", "src/beta.ts"]
        sample = sample_workspace_files(candidates, 3)
        assert "src/alpha.ts" in sample
        assert "src/beta.ts" in sample


class TestUniformSelection:
    def test_distributed_indices(self):
        """Indices spread evenly from first to last."""
        assert distributed_indices(10, 4) == [0, 3, 6, 9]
        assert distributed_indices(10, 5) == [0, 2, 5, 7, 9]
        assert distributed_indices(5, 1) == [0]
        assert distributed_indices(0, 3) == []

    def test_anchors_first_middle_last(self):
        """Three picks take the ends and the middle."""
        files = [str(index) for index in range(10)]
        assert pick_uniformly(files, 3) == ["0", "4", "9"]

    def test_collisions_move_to_nearest_free_index(self):
        """Colliding indices shift to the nearest unused slot."""
        files = [str(index) for index in range(10)]
        picked = pick_uniformly(files, 5)
        assert len(picked) == 5
        assert sorted(picked, key=int) == ["0", "1", "2", "4", "9"]

    def test_fewer_files_than_count(self):
        """Asking for more than exists returns everything."""
        assert pick_uniformly(["a", "b"], 5) == ["a", "b"]


class TestTokens:
    def test_singularization(self):
        """Plural tokens are reduced to their singular."""
        assert normalize_token("factories") == "factory"
        assert normalize_token("routes") == "route"
        assert normalize_token("bus") == "bus"

    def test_tokenize_splits_camel_case_and_delimiters(self):
        """Path parts split on case changes and punctuation."""
        assert tokenize_path_part("userController.test.ts", strip_extension=True) == ["user", "controller", "test"]
        assert tokenize_path_part("api_v2-client", strip_extension=False) == ["api", "v2", "client"]

    def test_later_groups_override(self):
        """Tokens repeated in a later hint group take that group's priority."""
        priorities = create_token_priority_map([["alpha", "beta"], ["alpha"]])
        assert priorities == {"alpha": 2, "beta": 1}

    def test_primary_token_prefers_priority(self):
        """The highest-priority token in the path is chosen."""
        priorities = create_token_priority_map([["controller"], ["service"]])
        assert primary_token("src/services/user.controller.ts", priorities) == "controller"
        assert primary_token("src/services/user.ts", priorities) == "service"

    def test_primary_token_falls_back_to_first_non_generic(self):
        """Without hints the first meaningful token is chosen."""
        assert primary_token("src/widgets/button.ts", {}) == "button"
        assert primary_token("src/index.ts", {}) is None


class TestCollectCandidateFiles:
    def test_include_and_exclude(self, tmp_path):
        """Candidates honour include globs, exclude globs and skipped directories."""
        write_files(
            tmp_path,
            {
                "src/a.ts": "",
                "src/b.js": "",
                "lib/c.tsx": "",
                "README.md": "",
                "node_modules/x/i.js": "",
                "dist/out.js": "",
                "nested/node_modules/y/j.js": "",
            },
        )
        files = collect_candidate_files(
            tmp_path,
            ("**/*.{js,jsx,ts,tsx,cjs,mjs}",),
            ("**/node_modules/**", "**/dist/**"),
        )
        assert files == ["lib/c.tsx", "src/a.ts", "src/b.js"]

    def test_empty_workspace(self, tmp_path):
        """An empty directory has no candidates."""
        assert collect_candidate_files(tmp_path, ("**/*.ts",), ()) == []
