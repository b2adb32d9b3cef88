"""tpaws - TargetProcess + AWS CodeCommit workflow CLI."""
