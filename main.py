# Import library
from smp.main import StableMarriageProblem

instance = StableMarriageProblem(n=6, p_dict={'seed': 7, 'exact_impact': True}, printing=True)
instance.solve()
print(instance.solution['matching'])
print(instance.solution['metrics']['stability_score'], instance.solution['metrics']['avg_happiness'])
instance.what_if()
instance.export_to_excel()
