"""
Script: heroku_deploy package
What: Holds the Heroku artifact deploy helper used from GitHub Actions and shells.
Doing: Groups argument resolution, environment rules, the API client, and the CLI entry point.
Why: Keeps deploy logic readable and testable instead of burying it in workflow YAML.
Goal: Provide one clear path from a build artifact to a started Heroku build.
"""
