"""
Streamlit UI for the Listing Pricer.

Features:
- Pricing configuration sidebar (rates, fees, tax, shipping)
- Editable profit tier table
- Price breakdown and derivation trace for a single cost
- Price sheet across a range of costs
"""
import streamlit as st
import pandas as pd
from datetime import datetime

from listing_pricer import __version__
from listing_pricer.config.settings import get_settings
from listing_pricer.engine import PriceCalculator, PricingError, default_pricing_config
from listing_pricer.engine.price_sheet import build_price_sheet, tiers_from_frame, tiers_to_frame


st.set_page_config(
    page_title="Listing Pricer",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_calculator():
    """Get cached calculator instance."""
    return PriceCalculator(strict_tiers=get_settings().strict_tiers)


calculator = get_calculator()
defaults = default_pricing_config()


# ============================================================================
# SIDEBAR: Pricing Configuration
# ============================================================================
with st.sidebar:
    st.header("⚙️ Pricing Configuration")

    with st.container(border=True):
        st.caption("Currency")
        spent_rate = st.number_input("Spent Rate", min_value=0.0, value=83.0, step=0.5)
        payout_rate = st.number_input("Payout Rate", min_value=0.0, value=80.0, step=0.5)

    with st.container(border=True):
        st.caption("Profit & Fees")
        desired_profit = st.number_input("Desired Profit", min_value=0.0, value=500.0, step=10.0)
        fixed_fee = st.number_input("Fixed Fee", min_value=0.0, value=float(defaults['fixedFee']))
        sale_tax = st.number_input("Sale Tax %", min_value=0.0, max_value=100.0, value=float(defaults['saleTax']))
        ebay_fee = st.number_input("eBay Fee %", min_value=0.0, max_value=100.0, value=float(defaults['ebayFee']))
        ads_fee = st.number_input("Ads Fee %", min_value=0.0, max_value=100.0, value=float(defaults['adsFee']))
        tds_fee = st.number_input("TDS Fee %", min_value=0.0, max_value=100.0, value=float(defaults['tdsFee']))

    with st.container(border=True):
        st.caption("Sourcing")
        shipping_cost = st.number_input("Shipping Cost", min_value=0.0, value=float(defaults['shippingCost']))
        tax_rate = st.number_input("Tax Rate %", min_value=0.0, max_value=100.0, value=float(defaults['taxRate']))

    st.divider()
    pricing_enabled = st.toggle("Pricing enabled", value=bool(defaults['enabled']))
    tiers_enabled = st.toggle("Tiered profit", value=bool(defaults['profitTiers']['enabled']))


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Listing Pricer")
st.caption(f"v{__version__} | {datetime.now().strftime('%Y-%m-%d')}")

tiers = []
if tiers_enabled:
    st.subheader("Profit Tiers")
    if 'tier_table' not in st.session_state:
        st.session_state.tier_table = tiers_to_frame([
            {'minCost': 0.0, 'maxCost': 50.0, 'profit': 300.0},
            {'minCost': 50.0, 'maxCost': None, 'profit': 600.0},
        ])
    edited = st.data_editor(
        st.session_state.tier_table,
        num_rows="dynamic",
        use_container_width=True,
        key="tier_editor",
    )
    tiers = tiers_from_frame(edited)
    st.caption("Leave Max Cost blank on the last tier for an unlimited range.")

config = {
    'enabled': pricing_enabled,
    'spentRate': spent_rate,
    'payoutRate': payout_rate,
    'desiredProfit': desired_profit,
    'fixedFee': fixed_fee,
    'saleTax': sale_tax,
    'ebayFee': ebay_fee,
    'adsFee': ads_fee,
    'tdsFee': tds_fee,
    'shippingCost': shipping_cost,
    'taxRate': tax_rate,
    'profitTiers': {'enabled': tiers_enabled, 'tiers': tiers},
}

try:
    for warning in calculator.validator.validate(config):
        st.warning(warning)
except PricingError as e:
    st.error(f"{e.kind}: {e}")
    st.stop()

tab1, tab2 = st.tabs(["⚡ Price", "📊 Price Sheet"])


# ============================================================================
# TAB 1: SINGLE PRICE
# ============================================================================
with tab1:
    cost = st.number_input("Cost", min_value=0.0, value=20.0, step=1.0)

    try:
        result = calculator.compute_price(config, cost)
    except PricingError as e:
        st.error(f"{e.kind}: {e}")
    else:
        b = result.breakdown
        m1, m2, m3 = st.columns(3)
        m1.metric("Listing Price", f"{result.price:,.2f}")
        m2.metric("Profit", f"{b.resolved_profit:,.2f}", b.profit_tier.cost_range if b.profit_tier.enabled else None)
        m3.metric("Fee Multiplier", f"{b.fee_multiplier:.4f}")

        for warning in result.warnings:
            st.warning(warning)

        col1, col2 = st.columns(2, gap="large")
        with col1:
            st.caption("Breakdown")
            rows = [(k, v) for k, v in b.to_dict().items() if k != 'profitTier']
            st.dataframe(pd.DataFrame(rows, columns=['Field', 'Value']), hide_index=True, use_container_width=True)
        with col2:
            with st.expander("🔍 Derivation", expanded=True):
                for t in result.trace:
                    st.caption(f"**{t.step}**: {t.description} = `{t.value}`")


# ============================================================================
# TAB 2: PRICE SHEET
# ============================================================================
with tab2:
    c1, c2, c3 = st.columns(3)
    low = c1.number_input("From cost", min_value=0.01, value=5.0)
    high = c2.number_input("To cost", min_value=0.01, value=150.0)
    step = c3.number_input("Step", min_value=0.01, value=5.0)

    if high < low:
        st.info("'To cost' must be at least 'From cost'.")
    else:
        count = int((high - low) / step) + 1
        costs = [round(low + i * step, 2) for i in range(count)]
        try:
            sheet = build_price_sheet(config, costs, calculator=calculator)
        except PricingError as e:
            st.error(f"{e.kind}: {e}")
        else:
            st.line_chart(sheet, x='cost', y='finalPrice')
            st.dataframe(sheet, hide_index=True, use_container_width=True)
