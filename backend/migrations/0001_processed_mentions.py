from yoyo import step

steps = [
    step(
        """
        CREATE TABLE IF NOT EXISTS processed_mentions (
            mention_id TEXT PRIMARY KEY,
            processed_at TIMESTAMPTZ DEFAULT NOW()
        );
        CREATE INDEX IF NOT EXISTS idx_processed_mentions_at ON processed_mentions(processed_at);
        """,
        """
        DROP TABLE IF EXISTS processed_mentions;
        """
    ),
]
