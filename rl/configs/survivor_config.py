"""
Training configuration for the survivor environment
"""

# Session parameters (splatted into SessionConfig)
SESSION_CONFIG = {
    "initial_health": 5,
    "initial_bombs": 3,
    "initial_enemy_count": 5,
    "enemy_spawn_padding": 64,
    "max_enemy_cap": 25,
    "world_width": 1280,
    "world_height": 720,
}

# Environment parameters
ENV_CONFIG = {
    # "render_mode": None,  # Don't render during training
    "session_config": SESSION_CONFIG,
    "dt": 1/30,
    "max_steps": 5400,  # 3 minutes at 30 FPS
    "k_enemies": 5,
    "m_gems": 3,
}

# ==============================================================================
# REWARD SHAPING
# ==============================================================================

REWARD_CONFIG = {
    "R_KILL": 1.0,       # Reward for killing an enemy
    "R_XP": 0.1,         # Reward per XP point collected
    "R_LEVEL": 0.5,      # Reward per level gained
    "R_DAMAGE": 1.0,     # Penalty per heart lost
    "R_TIME": 0.001,     # Small time penalty
    "R_DEATH": 5.0,      # Death penalty
}

# ==============================================================================
# ALGORITHM HYPERPARAMETERS
# ==============================================================================

PPO_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "n_steps": 1024,
    "batch_size": 256,
    "n_epochs": 10,
    "gamma": 0.99,
    "gae_lambda": 0.95,
    "clip_range": 0.2,
    "ent_coef": 0.01,
    "vf_coef": 0.5,
    "max_grad_norm": 0.5,
    "verbose": 1,
}

DQN_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 1e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 128,
    "tau": 1.0,
    "gamma": 0.99,
    "train_freq": 4,
    "gradient_steps": 1,
    "target_update_interval": 1000,
    "exploration_fraction": 0.1,
    "exploration_initial_eps": 1.0,
    "exploration_final_eps": 0.05,
    "verbose": 1,
}

# ==============================================================================
# TRAINING SETTINGS
# ==============================================================================

TRAINING_CONFIG = {
    "total_timesteps": 500_000,
    "save_freq": 10_000,
    "eval_freq": 5_000,
    "log_dir": "./logs",
    "model_dir": "./models",
    "tensorboard_log": "./tensorboard_logs",
}
