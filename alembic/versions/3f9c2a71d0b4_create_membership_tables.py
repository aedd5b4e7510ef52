"""create_membership_tables

Revision ID: 3f9c2a71d0b4
Revises:
Create Date: 2026-10-19 10:12:44.118203
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9c2a71d0b4'
down_revision = None
branch_labels = None
depends_on = None

member_status = sa.Enum('pending', 'registered', 'inactive', name='member_status_enum')
member_role = sa.Enum(
    'member', 'member_administrator', 'member_superuser', name='member_role_enum'
)
end_reason = sa.Enum(
    'withdrawal', 'expulsion', 'death', 'inactivity', 'non_payment', 'other',
    name='membership_end_reason_enum',
)
audit_result = sa.Enum('success', 'failure', name='audit_result_enum')


def upgrade() -> None:
    op.create_table(
        'members',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('status', member_status, nullable=False),
        sa.Column('registration_completed', sa.Boolean(), nullable=True),
        sa.Column('role', member_role, nullable=False),
        sa.Column('activity_hours', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_members')),
    )
    op.create_index(op.f('ix_members_organization_id'), 'members', ['organization_id'])
    op.create_index(op.f('ix_members_email'), 'members', ['email'])
    op.create_index(op.f('ix_members_status'), 'members', ['status'])

    op.create_table(
        'membership_details',
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('fee_payment_year', sa.Integer(), nullable=True),
        sa.Column('fee_payment_date', sa.Date(), nullable=True),
        sa.Column('card_number', sa.String(), nullable=True),
        sa.Column('card_stamp_issued', sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(
            ['member_id'], ['members.id'],
            name=op.f('fk_membership_details_member_id_members'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('member_id', name=op.f('pk_membership_details')),
        sa.UniqueConstraint('card_number', name=op.f('uq_membership_details_card_number')),
    )

    op.create_table(
        'membership_periods',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('end_reason', end_reason, nullable=True),
        sa.ForeignKeyConstraint(
            ['member_id'], ['members.id'],
            name=op.f('fk_membership_periods_member_id_members'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_membership_periods')),
    )
    op.create_index(
        op.f('ix_membership_periods_member_id'), 'membership_periods', ['member_id']
    )

    op.create_table(
        'organization_settings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('renewal_start_month', sa.Integer(), nullable=True),
        sa.Column('renewal_start_day', sa.Integer(), nullable=True),
        sa.Column('activity_hours_threshold', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_organization_settings')),
        sa.UniqueConstraint(
            'organization_id', name=op.f('uq_organization_settings_organization_id')
        ),
    )

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('action_type', sa.String(), nullable=False),
        sa.Column('performed_by', sa.Uuid(), nullable=True),
        sa.Column('action_details', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('status', audit_result, nullable=False),
        sa.Column('affected_member', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_audit_logs')),
    )
    op.create_index(op.f('ix_audit_logs_organization_id'), 'audit_logs', ['organization_id'])
    op.create_index(op.f('ix_audit_logs_action_type'), 'audit_logs', ['action_type'])
    op.create_index(op.f('ix_audit_logs_affected_member'), 'audit_logs', ['affected_member'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('organization_settings')
    op.drop_table('membership_periods')
    op.drop_table('membership_details')
    op.drop_table('members')
    for enum_type in (audit_result, end_reason, member_role, member_status):
        enum_type.drop(op.get_bind(), checkfirst=True)
