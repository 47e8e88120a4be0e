"""initial schema: catalog, plans, sessions, set logs, account rows

Revision ID: 4f1d2a9c7e31
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '4f1d2a9c7e31'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.UniqueConstraint('username', name='uq_users_username'),
    )
    op.create_table(
        'difficulty_levels',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=60), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_difficulty_levels')),
        sa.UniqueConstraint('name', name='uq_difficulty_levels_name'),
    )
    op.create_table(
        'exercise_regions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=60), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_exercise_regions')),
        sa.UniqueConstraint('name', name='uq_exercise_regions_name'),
    )
    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('video_url', sa.String(length=255), nullable=True),
        sa.Column('image_url', sa.String(length=255), nullable=True),
        sa.Column('difficulty_level_id', sa.Integer(), nullable=False),
        sa.Column('region_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(name) > 0', name=op.f('ck_exercises_name_not_empty')),
        sa.ForeignKeyConstraint(
            ['difficulty_level_id'], ['difficulty_levels.id'],
            name=op.f('fk_exercises_difficulty_level_id_difficulty_levels'), ondelete='RESTRICT',
        ),
        sa.ForeignKeyConstraint(
            ['region_id'], ['exercise_regions.id'],
            name=op.f('fk_exercises_region_id_exercise_regions'), ondelete='RESTRICT',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_exercises')),
    )
    op.create_index('ix_exercises_name', 'exercises', ['name'])
    op.create_index('ix_exercises_level_region', 'exercises', ['difficulty_level_id', 'region_id'])

    op.create_table(
        'workout_plans',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_workout_plans_user_id_users'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_workout_plans')),
    )
    op.create_index('ix_workout_plans_user', 'workout_plans', ['user_id'])

    op.create_table(
        'plan_exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('plan_id', sa.Integer(), nullable=False),
        sa.Column('exercise_id', sa.Integer(), nullable=False),
        sa.Column('sets', sa.Integer(), nullable=False),
        sa.Column('reps', sa.Integer(), nullable=False),
        sa.Column('rest_seconds', sa.Integer(), nullable=True),
        sa.Column('order_in_plan', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('sets >= 1', name=op.f('ck_plan_exercises_sets_positive')),
        sa.CheckConstraint('reps >= 1', name=op.f('ck_plan_exercises_reps_positive')),
        sa.ForeignKeyConstraint(
            ['plan_id'], ['workout_plans.id'],
            name=op.f('fk_plan_exercises_plan_id_workout_plans'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['exercise_id'], ['exercises.id'],
            name=op.f('fk_plan_exercises_exercise_id_exercises'), ondelete='RESTRICT',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_plan_exercises')),
    )
    op.create_index('ix_plan_exercises_plan_exercise', 'plan_exercises', ['plan_id', 'exercise_id'])

    op.create_table(
        'workout_sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('plan_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_workout_sessions_user_id_users'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['plan_id'], ['workout_plans.id'],
            name=op.f('fk_workout_sessions_plan_id_workout_plans'), ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_workout_sessions')),
    )
    op.create_index('ix_ws_user_started', 'workout_sessions', ['user_id', 'started_at'])
    op.create_index('ix_ws_plan', 'workout_sessions', ['plan_id'])

    op.create_table(
        'session_exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('exercise_id', sa.Integer(), nullable=False),
        sa.Column('order_in_session', sa.Integer(), nullable=True),
        sa.Column('plan_exercise_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['session_id'], ['workout_sessions.id'],
            name=op.f('fk_session_exercises_session_id_workout_sessions'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['exercise_id'], ['exercises.id'],
            name=op.f('fk_session_exercises_exercise_id_exercises'), ondelete='RESTRICT',
        ),
        sa.ForeignKeyConstraint(
            ['plan_exercise_id'], ['plan_exercises.id'],
            name=op.f('fk_session_exercises_plan_exercise_id_plan_exercises'), ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_session_exercises')),
    )
    op.create_index('ix_se_session', 'session_exercises', ['session_id'])
    op.create_index('ix_se_exercise', 'session_exercises', ['exercise_id'])
    op.create_index('ix_se_plan_exercise', 'session_exercises', ['plan_exercise_id'])

    op.create_table(
        'set_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_exercise_id', sa.Integer(), nullable=False),
        sa.Column('set_number', sa.Integer(), nullable=False),
        sa.Column('weight', sa.Numeric(precision=6, scale=2), nullable=True),
        sa.Column('reps_completed', sa.Integer(), nullable=True),
        sa.Column('is_completed', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('set_number >= 1', name=op.f('ck_set_logs_set_number_positive')),
        sa.ForeignKeyConstraint(
            ['session_exercise_id'], ['session_exercises.id'],
            name=op.f('fk_set_logs_session_exercise_id_session_exercises'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_set_logs')),
        sa.UniqueConstraint(
            'session_exercise_id', 'set_number', name='uq_set_logs_session_exercise_set'
        ),
    )

    op.create_table(
        'user_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('daily_goal', sa.Integer(), nullable=True),
        sa.Column('is_dark_mode', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('notifications_enabled', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('notification_time', sa.Time(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_user_settings_user_id_users'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_user_settings')),
        sa.UniqueConstraint('user_id', name='uq_user_settings_user'),
    )
    op.create_table(
        'achievements',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('achieved_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_achievements_user_id_users'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_achievements')),
    )
    op.create_index('ix_achievements_user', 'achievements', ['user_id'])
    op.create_table(
        'calorie_calculations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('height_cm', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('weight_kg', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=False),
        sa.Column('activity_level', sa.String(length=40), nullable=False),
        sa.Column('goal', sa.String(length=40), nullable=False),
        sa.Column('tdee', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('adjusted_calories', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('calculated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_calorie_calculations_user_id_users'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_calorie_calculations')),
    )
    op.create_index('ix_calorie_calculations_user', 'calorie_calculations', ['user_id'])


def downgrade():
    op.drop_index('ix_calorie_calculations_user', table_name='calorie_calculations')
    op.drop_table('calorie_calculations')
    op.drop_index('ix_achievements_user', table_name='achievements')
    op.drop_table('achievements')
    op.drop_table('user_settings')
    op.drop_table('set_logs')
    op.drop_index('ix_se_plan_exercise', table_name='session_exercises')
    op.drop_index('ix_se_exercise', table_name='session_exercises')
    op.drop_index('ix_se_session', table_name='session_exercises')
    op.drop_table('session_exercises')
    op.drop_index('ix_ws_plan', table_name='workout_sessions')
    op.drop_index('ix_ws_user_started', table_name='workout_sessions')
    op.drop_table('workout_sessions')
    op.drop_index('ix_plan_exercises_plan_exercise', table_name='plan_exercises')
    op.drop_table('plan_exercises')
    op.drop_index('ix_workout_plans_user', table_name='workout_plans')
    op.drop_table('workout_plans')
    op.drop_index('ix_exercises_level_region', table_name='exercises')
    op.drop_index('ix_exercises_name', table_name='exercises')
    op.drop_table('exercises')
    op.drop_table('exercise_regions')
    op.drop_table('difficulty_levels')
    op.drop_table('users')
