"""initial_schema_crawl_pipeline

Revision ID: 001
Revises: 
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    # Create projects table
    op.create_table(
        'projects',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('domain', sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_projects_id'), 'projects', ['id'], unique=False)
    op.create_index(op.f('ix_projects_domain'), 'projects', ['domain'], unique=False)

    # Create crawl_jobs table
    op.create_table(
        'crawl_jobs',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('project_id', sa.String(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('pending', 'crawling', 'scoring', 'complete', 'failed', 'cancelled', name='crawljobstatus'),
            nullable=False,
        ),
        sa.Column('pages_found', sa.Integer(), nullable=False),
        sa.Column('pages_crawled', sa.Integer(), nullable=False),
        sa.Column('pages_scored', sa.Integer(), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('site_context', sa.JSON(), nullable=True),
        sa.Column('last_batch_index', sa.Integer(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_crawl_jobs_id'), 'crawl_jobs', ['id'], unique=False)
    op.create_index(op.f('ix_crawl_jobs_project_id'), 'crawl_jobs', ['project_id'], unique=False)
    op.create_index(op.f('ix_crawl_jobs_status'), 'crawl_jobs', ['status'], unique=False)
    op.create_index('idx_crawl_jobs_project_status', 'crawl_jobs', ['project_id', 'status'], unique=False)

    # Create pages table
    op.create_table(
        'pages',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('job_id', sa.String(), nullable=False),
        sa.Column('project_id', sa.String(), nullable=False),
        sa.Column('url', sa.String(2048), nullable=False),
        sa.Column('canonical_url', sa.String(2048), nullable=True),
        sa.Column('status_code', sa.Integer(), nullable=False),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('meta_description', sa.Text(), nullable=True),
        sa.Column('word_count', sa.Integer(), nullable=False),
        sa.Column('content_hash', sa.String(128), nullable=True),
        sa.Column('raw_html_key', sa.String(1024), nullable=True),
        sa.Column('performance_audit_key', sa.String(1024), nullable=True),
        sa.Column('batch_index', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('crawled_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['job_id'], ['crawl_jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_pages_id'), 'pages', ['id'], unique=False)
    op.create_index(op.f('ix_pages_job_id'), 'pages', ['job_id'], unique=False)
    op.create_index(op.f('ix_pages_project_id'), 'pages', ['project_id'], unique=False)
    op.create_index(op.f('ix_pages_content_hash'), 'pages', ['content_hash'], unique=False)
    op.create_index('uq_pages_job_url', 'pages', ['job_id', 'url'], unique=True)
    op.create_index('idx_pages_job_order', 'pages', ['job_id', 'batch_index', 'position'], unique=False)

    # Create page_scores table
    op.create_table(
        'page_scores',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('page_id', sa.String(), nullable=False),
        sa.Column('job_id', sa.String(), nullable=False),
        sa.Column('overall_score', sa.Integer(), nullable=False),
        sa.Column('technical_score', sa.Integer(), nullable=False),
        sa.Column('content_score', sa.Integer(), nullable=False),
        sa.Column('ai_readiness_score', sa.Integer(), nullable=False),
        sa.Column('performance_score', sa.Integer(), nullable=False),
        sa.Column('letter_grade', sa.String(1), nullable=False),
        sa.Column('lighthouse_perf', sa.Float(), nullable=True),
        sa.Column('lighthouse_seo', sa.Float(), nullable=True),
        sa.Column('detail', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['page_id'], ['pages.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['job_id'], ['crawl_jobs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_page_scores_id'), 'page_scores', ['id'], unique=False)
    op.create_index(op.f('ix_page_scores_page_id'), 'page_scores', ['page_id'], unique=True)
    op.create_index(op.f('ix_page_scores_job_id'), 'page_scores', ['job_id'], unique=False)

    # Create issues table
    op.create_table(
        'issues',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('page_id', sa.String(), nullable=False),
        sa.Column('job_id', sa.String(), nullable=False),
        sa.Column(
            'category',
            sa.Enum('technical', 'content', 'ai_readiness', 'performance', name='issuecategory'),
            nullable=False,
        ),
        sa.Column('severity', sa.Enum('critical', 'warning', 'info', name='issueseverity'), nullable=False),
        sa.Column('code', sa.String(64), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('recommendation', sa.Text(), nullable=True),
        sa.Column('data', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['page_id'], ['pages.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['job_id'], ['crawl_jobs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_issues_id'), 'issues', ['id'], unique=False)
    op.create_index(op.f('ix_issues_page_id'), 'issues', ['page_id'], unique=False)
    op.create_index(op.f('ix_issues_job_id'), 'issues', ['job_id'], unique=False)
    op.create_index(op.f('ix_issues_category'), 'issues', ['category'], unique=False)
    op.create_index(op.f('ix_issues_severity'), 'issues', ['severity'], unique=False)
    op.create_index(op.f('ix_issues_code'), 'issues', ['code'], unique=False)

    # Create project_integrations table
    op.create_table(
        'project_integrations',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('project_id', sa.String(), nullable=False),
        sa.Column('provider', sa.Enum('gsc', 'psi', 'ga4', 'clarity', name='integrationprovider'), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False),
        sa.Column('encrypted_credentials', sa.Text(), nullable=True),
        sa.Column('config', sa.JSON(), nullable=True),
        sa.Column('token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_synced_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_error', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('project_id', 'provider', name='uq_project_integration_provider'),
    )
    op.create_index(op.f('ix_project_integrations_id'), 'project_integrations', ['id'], unique=False)
    op.create_index(op.f('ix_project_integrations_project_id'), 'project_integrations', ['project_id'], unique=False)

    # Create enrichment_results table
    op.create_table(
        'enrichment_results',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('page_id', sa.String(), nullable=False),
        sa.Column('job_id', sa.String(), nullable=False),
        sa.Column('provider', sa.Enum('gsc', 'psi', 'ga4', 'clarity', name='integrationprovider', create_type=False), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['page_id'], ['pages.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['job_id'], ['crawl_jobs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_enrichment_results_id'), 'enrichment_results', ['id'], unique=False)
    op.create_index(op.f('ix_enrichment_results_page_id'), 'enrichment_results', ['page_id'], unique=False)
    op.create_index(op.f('ix_enrichment_results_job_id'), 'enrichment_results', ['job_id'], unique=False)
    op.create_index(op.f('ix_enrichment_results_provider'), 'enrichment_results', ['provider'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('enrichment_results')
    op.drop_table('project_integrations')
    op.drop_table('issues')
    op.drop_table('page_scores')
    op.drop_table('pages')
    op.drop_table('crawl_jobs')
    op.drop_table('projects')

    bind = op.get_bind()
    for enum_name in ('integrationprovider', 'issueseverity', 'issuecategory', 'crawljobstatus'):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
