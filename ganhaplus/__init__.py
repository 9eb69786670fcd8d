"""GanhaPlus: reward-for-engagement wallet backend."""
