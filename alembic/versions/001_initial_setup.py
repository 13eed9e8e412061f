from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial_setup'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JENIS_SURAT_VALUES = (
    'SURAT_KETERANGAN_DOMISILI', 'SURAT_KETERANGAN_USAHA', 'SURAT_KETERANGAN_TIDAK_MAMPU',
    'SURAT_PENGANTAR_KTP', 'SURAT_PENGANTAR_KK', 'SURAT_KETERANGAN_KELAHIRAN',
    'SURAT_KETERANGAN_KEMATIAN', 'SURAT_KETERANGAN_PINDAH', 'LAINNYA'
)
STATUS_SURAT_VALUES = ('pending', 'processing', 'approved', 'rejected', 'completed')

user_role_enum = postgresql.ENUM('ADMIN_DESA', 'PERANGKAT_DESA', 'WARGA', name='userrole', create_type=False)
jenis_kelamin_enum = postgresql.ENUM('L', 'P', name='jenis_kelamin', create_type=False)
status_perkawinan_enum = postgresql.ENUM(
    'belum_kawin', 'kawin', 'cerai_hidup', 'cerai_mati', name='status_perkawinan', create_type=False
)
status_hidup_enum = postgresql.ENUM('hidup', 'meninggal', name='status_hidup', create_type=False)
jenis_surat_enum = postgresql.ENUM(*JENIS_SURAT_VALUES, name='jenis_surat', create_type=False)
status_surat_enum = postgresql.ENUM(*STATUS_SURAT_VALUES, name='status_surat', create_type=False)

ALL_ENUMS = (
    user_role_enum, jenis_kelamin_enum, status_perkawinan_enum,
    status_hidup_enum, jenis_surat_enum, status_surat_enum
)


def _audit_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_by', sa.String(length=36), nullable=True),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.Column('updated_by', sa.String(length=36), nullable=True),
    ]


def upgrade() -> None:
    connection = op.get_bind()
    for enum in ALL_ENUMS:
        enum.create(connection, checkfirst=True)

    # ===== USERS =====
    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_audit_columns(),
        sa.Column('nama', sa.String(length=200), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('jabatan', sa.String(length=200), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('role', user_role_enum, nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_nama'), 'users', ['nama'], unique=False)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    # ===== PENDUDUK =====
    op.create_table('penduduk',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_audit_columns(),
        sa.Column('nik', sa.String(length=16), nullable=False),
        sa.Column('no_kk', sa.String(length=16), nullable=False),
        sa.Column('nama', sa.String(length=100), nullable=False),
        sa.Column('tempat_lahir', sa.String(length=100), nullable=False),
        sa.Column('tanggal_lahir', sa.Date(), nullable=False),
        sa.Column('jenis_kelamin', jenis_kelamin_enum, nullable=False),
        sa.Column('agama', sa.String(length=20), nullable=False),
        sa.Column('status_perkawinan', status_perkawinan_enum, nullable=False),
        sa.Column('pekerjaan', sa.String(length=100), nullable=True),
        sa.Column('alamat', sa.String(), nullable=False),
        sa.Column('rt', sa.String(length=3), nullable=False),
        sa.Column('rw', sa.String(length=3), nullable=False),
        sa.Column('status_hidup', status_hidup_enum, nullable=False, server_default='hidup'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_penduduk_nik'), 'penduduk', ['nik'], unique=True)
    op.create_index(op.f('ix_penduduk_no_kk'), 'penduduk', ['no_kk'], unique=False)
    op.create_index(op.f('ix_penduduk_nama'), 'penduduk', ['nama'], unique=False)
    op.create_index(op.f('ix_penduduk_rt'), 'penduduk', ['rt'], unique=False)
    op.create_index(op.f('ix_penduduk_rw'), 'penduduk', ['rw'], unique=False)

    # ===== SURAT REQUESTS =====
    op.create_table('surat_requests',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_audit_columns(),
        sa.Column('jenis_surat', jenis_surat_enum, nullable=False),
        sa.Column('pemohon_id', sa.String(length=36), nullable=False),
        sa.Column('keperluan', sa.String(), nullable=False),
        sa.Column('status', status_surat_enum, nullable=False, server_default='pending'),
        sa.Column('tracking_code', sa.String(length=20), nullable=False),
        sa.Column('nomor_surat', sa.String(length=100), nullable=True),
        sa.Column('tanggal_pengajuan', sa.DateTime(timezone=True), nullable=False),
        sa.Column('tanggal_disetujui', sa.DateTime(timezone=True), nullable=True),
        sa.Column('tanggal_selesai', sa.DateTime(timezone=True), nullable=True),
        sa.Column('keterangan', sa.String(), nullable=True),
        sa.Column('processed_by', sa.String(length=36), nullable=True),
        sa.Column('approved_by', sa.String(length=36), nullable=True),
        sa.Column('template_data', sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.ForeignKeyConstraint(['pemohon_id'], ['penduduk.id'], ),
        sa.ForeignKeyConstraint(['processed_by'], ['users.id'], ),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_surat_requests_jenis_surat'), 'surat_requests', ['jenis_surat'], unique=False)
    op.create_index(op.f('ix_surat_requests_pemohon_id'), 'surat_requests', ['pemohon_id'], unique=False)
    op.create_index(op.f('ix_surat_requests_status'), 'surat_requests', ['status'], unique=False)
    op.create_index(op.f('ix_surat_requests_tracking_code'), 'surat_requests', ['tracking_code'], unique=True)
    op.create_index(op.f('ix_surat_requests_nomor_surat'), 'surat_requests', ['nomor_surat'], unique=True)
    op.create_index(op.f('ix_surat_requests_tanggal_pengajuan'), 'surat_requests', ['tanggal_pengajuan'], unique=False)
    op.create_index(op.f('ix_surat_requests_tanggal_disetujui'), 'surat_requests', ['tanggal_disetujui'], unique=False)

    # Counter lookup untuk penomoran surat
    op.create_index(
        'ix_surat_requests_numbering',
        'surat_requests',
        ['jenis_surat', 'status', 'tanggal_disetujui'],
        unique=False
    )


def downgrade() -> None:
    op.drop_index('ix_surat_requests_numbering', table_name='surat_requests')
    op.drop_table('surat_requests')
    op.drop_table('penduduk')
    op.drop_table('users')

    connection = op.get_bind()
    for enum in reversed(ALL_ENUMS):
        enum.drop(connection, checkfirst=True)
