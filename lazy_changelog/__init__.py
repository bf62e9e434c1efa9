"""lazy-changelog: semver decisions and changelogs from git history."""
