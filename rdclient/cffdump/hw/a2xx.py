# SPDX-License-Identifier: MIT
"""
Adreno a2xx (a200/a220/a225) register space and enums.

Register offsets are dword indices, as used by type-0 packets and
CP_SET_CONSTANT register writes.
"""
from ..utils import *
from enum import IntEnum

__all__ = ["A2XXRegs", "VGT_EVENT", "COLORFORMATX", "reg_name", "event_name", "format_name"]

REG_SPACE_SIZE = 0x8000

class A2XXRegs(RegMap):
    RBBM_PATCH_RELEASE              = 0x0001, Register32
    RBBM_CNTL                       = 0x003b, Register32
    RBBM_SOFT_RESET                 = 0x003c, Register32
    CP_PFP_UCODE_ADDR               = 0x00c0, Register32
    CP_PFP_UCODE_DATA               = 0x00c1, Register32

    CP_RB_BASE                      = 0x01c0, Register32
    CP_RB_CNTL                      = 0x01c1, Register32
    CP_RB_RPTR_ADDR                 = 0x01c3, Register32
    CP_RB_RPTR                      = 0x01c4, Register32
    CP_RB_WPTR                      = 0x01c5, Register32
    CP_RB_WPTR_DELAY                = 0x01c6, Register32
    CP_RB_RPTR_WR                   = 0x01c7, Register32
    CP_RB_WPTR_BASE                 = 0x01c8, Register32
    CP_QUEUE_THRESHOLDS             = 0x01d5, Register32
    SCRATCH_UMSK                    = 0x01dc, Register32
    SCRATCH_ADDR                    = 0x01dd, Register32
    CP_STATE_DEBUG_INDEX            = 0x01ec, Register32
    CP_STATE_DEBUG_DATA             = 0x01ed, Register32
    CP_INT_CNTL                     = 0x01f2, Register32
    CP_INT_STATUS                   = 0x01f3, Register32
    CP_INT_ACK                      = 0x01f4, Register32
    CP_ME_CNTL                      = 0x01f6, Register32
    CP_ME_STATUS                    = 0x01f7, Register32
    CP_ME_RAM_WADDR                 = 0x01f8, Register32
    CP_ME_RAM_RADDR                 = 0x01f9, Register32
    CP_ME_RAM_DATA                  = 0x01fa, Register32
    CP_DEBUG                        = 0x01fc, Register32
    CP_CSQ_RB_STAT                  = 0x01fd, Register32
    CP_CSQ_IB1_STAT                 = 0x01fe, Register32
    CP_CSQ_IB2_STAT                 = 0x01ff, Register32

    RBBM_PERFCOUNTER1_SELECT        = 0x0395, Register32
    RBBM_PERFCOUNTER1_LO            = 0x0397, Register32
    RBBM_PERFCOUNTER1_HI            = 0x0398, Register32
    RBBM_DEBUG                      = 0x039b, Register32
    RBBM_PM_OVERRIDE1               = 0x039c, Register32
    RBBM_PM_OVERRIDE2               = 0x039d, Register32
    RBBM_DEBUG_OUT                  = 0x03a0, Register32
    RBBM_DEBUG_CNTL                 = 0x03a1, Register32
    RBBM_READ_ERROR                 = 0x03b3, Register32
    RBBM_INT_CNTL                   = 0x03b4, Register32
    RBBM_INT_STATUS                 = 0x03b5, Register32
    RBBM_INT_ACK                    = 0x03b6, Register32
    MASTER_INT_SIGNAL               = 0x03b7, Register32
    RBBM_PERIPHID1                  = 0x03f9, Register32
    RBBM_PERIPHID2                  = 0x03fa, Register32

    CP_PERFMON_CNTL                 = 0x0444, Register32
    CP_PERFCOUNTER_SELECT           = 0x0445, Register32
    CP_PERFCOUNTER_LO               = 0x0446, Register32
    CP_PERFCOUNTER_HI               = 0x0447, Register32
    CP_ST_BASE                      = 0x044d, Register32
    CP_ST_BUFSZ                     = 0x044e, Register32
    CP_IB1_BASE                     = 0x0458, Register32
    CP_IB1_BUFSZ                    = 0x0459, Register32
    CP_IB2_BASE                     = 0x045a, Register32
    CP_IB2_BUFSZ                    = 0x045b, Register32
    CP_STAT                         = 0x047f, Register32

    SCRATCH_REG0                    = 0x0578, Register32
    SCRATCH_REG2                    = 0x057a, Register32
    RBBM_STATUS                     = 0x05d0, Register32

    COHER_SIZE_PM4                  = 0x0a29, Register32
    COHER_BASE_PM4                  = 0x0a2a, Register32
    COHER_STATUS_PM4                = 0x0a2b, Register32

    A220_VSC_BIN_SIZE               = 0x0c01, Register32
    A220_VSC_PIPE_DATA_LENGTH_7     = 0x0c1d, Register32
    PC_DEBUG_CNTL                   = 0x0c38, Register32
    PC_DEBUG_DATA                   = 0x0c39, Register32
    PA_SC_VIZ_QUERY_STATUS          = 0x0c44, Register32
    PA_SU_DEBUG_CNTL                = 0x0c80, Register32
    PA_SU_DEBUG_DATA                = 0x0c81, Register32
    GRAS_DEBUG_CNTL                 = 0x0c80, Register32
    GRAS_DEBUG_DATA                 = 0x0c81, Register32
    PA_SU_FACE_DATA                 = 0x0c86, Register32

    SQ_GPR_MANAGEMENT               = 0x0d00, Register32
    SQ_FLOW_CONTROL                 = 0x0d01, Register32
    SQ_INST_STORE_MANAGMENT         = 0x0d02, Register32
    SQ_DEBUG_MISC                   = 0x0d05, Register32
    SQ_INT_CNTL                     = 0x0d34, Register32
    SQ_INT_STATUS                   = 0x0d35, Register32
    SQ_INT_ACK                      = 0x0d36, Register32
    SQ_DEBUG_INPUT_FSM              = 0x0dae, Register32
    SQ_DEBUG_CONST_MGR_FSM          = 0x0daf, Register32
    SQ_DEBUG_TP_FSM                 = 0x0db0, Register32
    SQ_DEBUG_FSM_ALU_0              = 0x0db1, Register32
    SQ_DEBUG_FSM_ALU_1              = 0x0db2, Register32
    SQ_DEBUG_EXP_ALLOC              = 0x0db3, Register32
    SQ_DEBUG_PTR_BUFF               = 0x0dba, Register32
    SQ_DEBUG_GPR_VTX                = 0x0dbb, Register32
    SQ_DEBUG_GPR_PIX                = 0x0dbc, Register32
    SQ_DEBUG_TB_STATUS_SEL          = 0x0dbd, Register32
    SQ_DEBUG_VTX_TB_0               = 0x0dbe, Register32
    SQ_DEBUG_VTX_TB_1               = 0x0dbf, Register32
    SQ_DEBUG_VTX_TB_STATUS_REG      = 0x0dc0, Register32
    SQ_DEBUG_VTX_TB_STATE_MEM       = 0x0dc1, Register32
    SQ_DEBUG_PIX_TB_0               = 0x0dc2, Register32
    SQ_DEBUG_PIX_TB_STATUS_REG_0    = 0x0dc3, Register32
    SQ_DEBUG_PIX_TB_STATUS_REG_1    = 0x0dc4, Register32
    SQ_DEBUG_PIX_TB_STATUS_REG_2    = 0x0dc5, Register32
    SQ_DEBUG_PIX_TB_STATUS_REG_3    = 0x0dc6, Register32
    SQ_DEBUG_PIX_TB_STATE_MEM       = 0x0dc7, Register32

    TC_CNTL_STATUS                  = 0x0e00, Register32
    TP0_CHICKEN                     = 0x0e1e, Register32
    RB_EDRAM_INFO                   = 0x0f02, Register32
    RB_DEBUG_CNTL                   = 0x0f26, Register32
    RB_DEBUG_DATA                   = 0x0f27, Register32

    # Context registers, also reachable as CP_SET_CONSTANT index + 0x2000
    RB_SURFACE_INFO                 = 0x2000, Register32
    RB_DEPTH_INFO                   = 0x2002, Register32
    A225_RB_COLOR_INFO3             = 0x2005, Register32
    COHER_DEST_BASE_0               = 0x2006, Register32
    PA_SC_SCREEN_SCISSOR_TL         = 0x200e, Register32
    PA_SC_SCREEN_SCISSOR_BR         = 0x200f, Register32
    PA_SC_WINDOW_OFFSET             = 0x2080, Register32
    PA_SC_WINDOW_SCISSOR_TL         = 0x2081, Register32
    PA_SC_WINDOW_SCISSOR_BR         = 0x2082, Register32
    VGT_MAX_VTX_INDX                = 0x2100, Register32
    A220_PC_MAX_VTX_INDX            = 0x2100, Register32
    VGT_MIN_VTX_INDX                = 0x2101, Register32
    PC_INDEX_OFFSET                 = 0x2102, Register32
    VGT_INDX_OFFSET                 = 0x2102, Register32
    A220_PC_INDX_OFFSET             = 0x2102, Register32
    A225_PC_MULTI_PRIM_IB_RESET_INDX = 0x2103, Register32
    RB_COLOR_MASK                   = 0x2104, Register32
    RB_FOG_COLOR                    = 0x2109, Register32
    RB_STENCILREFMASK_BF            = 0x210c, Register32
    PA_CL_VPORT_XSCALE              = 0x210f, Register32
    PA_CL_VPORT_ZSCALE              = 0x2113, Register32
    PA_CL_VPORT_ZOFFSET             = 0x2114, Register32
    SQ_PROGRAM_CNTL                 = 0x2180, Register32
    SQ_INTERPOLATOR_CNTL            = 0x2182, Register32
    SQ_WRAPPING_0                   = 0x2183, Register32
    SQ_WRAPPING_1                   = 0x2184, Register32
    SQ_PS_PROGRAM                   = 0x21f6, Register32
    SQ_VS_PROGRAM                   = 0x21f7, Register32
    RB_DEPTHCONTROL                 = 0x2200, Register32
    RB_COLORCONTROL                 = 0x2202, Register32
    PA_CL_CLIP_CNTL                 = 0x2204, Register32
    PA_SU_SC_MODE_CNTL              = 0x2205, Register32
    PA_CL_VTE_CNTL                  = 0x2206, Register32
    RB_MODECONTROL                  = 0x2208, Register32
    A220_RB_LRZ_VSC_CONTROL         = 0x2209, Register32
    RB_SAMPLE_POS                   = 0x220a, Register32
    A220_GRAS_CONTROL               = 0x2210, Register32
    PA_SU_POINT_SIZE                = 0x2280, Register32
    PA_SU_LINE_CNTL                 = 0x2282, Register32
    PA_SC_LINE_STIPPLE              = 0x2283, Register32
    PA_SC_VIZ_QUERY                 = 0x2293, Register32
    VGT_ENHANCE                     = 0x2294, Register32
    PA_SC_LINE_CNTL                 = 0x2300, Register32
    PA_SC_AA_CONFIG                 = 0x2301, Register32
    SQ_PS_CONST                     = 0x2308, Register32
    SQ_DEBUG_MISC_0                 = 0x2309, Register32
    SQ_DEBUG_MISC_1                 = 0x230a, Register32
    PA_SC_AA_MASK                   = 0x2312, Register32
    VGT_VERTEX_REUSE_BLOCK_CNTL     = 0x2316, Register32
    A220_PC_VERTEX_REUSE_BLOCK_CNTL = 0x2316, Register32
    RB_COPY_CONTROL                 = 0x2318, Register32
    RB_DEPTH_CLEAR                  = 0x231d, Register32
    RB_SAMPLE_COUNT_CTL             = 0x2324, Register32
    RB_COLOR_DEST_MASK              = 0x2326, Register32
    A225_GRAS_UCP0X                 = 0x2340, Register32
    A225_GRAS_UCP5W                 = 0x2357, Register32
    A225_GRAS_UCP_ENABLED           = 0x2360, Register32
    PA_SU_POLY_OFFSET_FRONT_SCALE   = 0x2380, Register32
    PA_SU_POLY_OFFSET_BACK_OFFSET   = 0x2383, Register32

    SQ_CONSTANT                     = irange(0x4000, 0x800), Register32
    SQ_FETCH                        = irange(0x4800, 0xc0), Register32
    SQ_CF_BOOLEANS                  = 0x4900, Register32
    SQ_CF_LOOP                      = 0x4908, Register32

class VGT_EVENT(IntEnum):
    VS_DEALLOC                      = 0
    PS_DEALLOC                      = 1
    VS_DONE_TS                      = 2
    PS_DONE_TS                      = 3
    CACHE_FLUSH_TS                  = 4
    CONTEXT_DONE                    = 5
    CACHE_FLUSH                     = 6
    VIZQUERY_START                  = 7
    VIZQUERY_END                    = 8
    SC_WAIT_WC                      = 9
    RST_PIX_CNT                     = 13
    RST_VTX_CNT                     = 14
    TILE_FLUSH                      = 15
    CACHE_FLUSH_AND_INV_TS_EVENT    = 20
    ZPASS_DONE                      = 21
    CACHE_FLUSH_AND_INV_EVENT       = 22
    PERFCOUNTER_START               = 23
    PERFCOUNTER_STOP                = 24
    VS_FETCH_DONE                   = 27
    FACENESS_FLUSH                  = 28

class COLORFORMATX(IntEnum):
    COLORX_4_4_4_4                  = 0
    COLORX_1_5_5_5                  = 1
    COLORX_5_6_5                    = 2
    COLORX_8                        = 3
    COLORX_8_8                      = 4
    COLORX_8_8_8_8                  = 5
    COLORX_S8_8_8_8                 = 6
    COLORX_16_FLOAT                 = 7
    COLORX_16_16_FLOAT              = 8
    COLORX_16_16_16_16_FLOAT        = 9
    COLORX_32_FLOAT                 = 10
    COLORX_32_32_FLOAT              = 11
    COLORX_32_32_32_32_FLOAT        = 12
    COLORX_2_3_3                    = 13
    COLORX_8_8_8                    = 14

def _enum_name(enum, value):
    try:
        return enum(value).name
    except ValueError:
        return None

def reg_name(index):
    if not 0 <= index < REG_SPACE_SIZE:
        return None
    return A2XXRegs.get_name(index)

def event_name(value):
    return _enum_name(VGT_EVENT, value)

def format_name(value):
    return _enum_name(COLORFORMATX, value)
